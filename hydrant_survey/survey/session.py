"""Survey session state machine and its persistence round trip.

A session starts unconfigured, becomes configured through ``setup``,
accumulates records through ``capture`` and returns to the unconfigured
default through ``reset``. Every state change is written to the blob store
under a single key; a missing or malformed blob restores as the default.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from hydrant_survey.common.constants import DEFAULT_MAIN_AREA, SESSION_KEY
from hydrant_survey.common.errors import InvalidStateError, ValidationError
from hydrant_survey.common.logging import get_logger, log_event
from hydrant_survey.survey.models import HydrantRecord, SessionSnapshot
from hydrant_survey.survey.registry import RecordRegistry
from hydrant_survey.survey.storage import BlobStore


class SurveySession:
    def __init__(
        self,
        store: BlobStore,
        *,
        key: str = SESSION_KEY,
        default_area_label: str = DEFAULT_MAIN_AREA,
    ) -> None:
        self.store = store
        self.key = key
        self.default_area_label = default_area_label
        self._area_label = default_area_label
        self._configured = False
        self._registry = RecordRegistry()
        self.logger = get_logger()

    @property
    def area_label(self) -> str:
        return self._area_label

    @property
    def configured(self) -> bool:
        return self._configured

    def count(self) -> int:
        return self._registry.count()

    def records(self) -> list[HydrantRecord]:
        return self._registry.list()

    def setup(self, area_label: str | None) -> None:
        if self._configured:
            raise InvalidStateError("Session is already configured; reset it before changing the area")
        cleaned = (area_label or "").strip()
        self._area_label = cleaned or self.default_area_label
        self._configured = True
        self._persist()
        log_event(self.logger, "session configured", event="SESSION_SETUP", status="ok", area=self._area_label)

    def capture(self, record: HydrantRecord) -> None:
        if not self._configured:
            raise InvalidStateError("Cannot capture a record before the session is set up")
        self._registry.add(record)
        self._persist()
        log_event(
            self.logger,
            "record captured",
            event="RECORD_CAPTURED",
            status="ok",
            area=self._area_label,
            record_id=record.id,
            rows_out=self._registry.count(),
        )

    def reset(self) -> None:
        self._registry.clear()
        self._area_label = self.default_area_label
        self._configured = False
        self._persist()
        log_event(self.logger, "session reset", event="SESSION_RESET", status="ok")

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            area_label=self._area_label,
            configured=self._configured,
            records=tuple(self._registry.list()),
        )

    def next_timestamp(self, now_ms: int) -> int:
        last = self._registry.last_timestamp()
        if last is None:
            return now_ms
        return max(now_ms, last)

    def to_payload(self) -> dict[str, Any]:
        return {
            "mainAreaLocation": self._area_label,
            "hydrants": [record.to_dict() for record in self._registry.list()],
            "isSetupDone": self._configured,
        }

    def _load_payload(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise TypeError("session payload must be an object")
        area_label = payload["mainAreaLocation"]
        configured = payload["isSetupDone"]
        hydrants = payload["hydrants"]
        if not isinstance(area_label, str) or not area_label.strip():
            raise TypeError("mainAreaLocation must be a non-empty string")
        if not isinstance(configured, bool):
            raise TypeError("isSetupDone must be a boolean")
        if not isinstance(hydrants, list):
            raise TypeError("hydrants must be a list")

        registry = RecordRegistry()
        for entry in hydrants:
            registry.add(HydrantRecord.from_dict(entry))

        self._area_label = area_label
        self._configured = configured
        self._registry = registry

    def _persist(self) -> None:
        self.store.save(self.key, json.dumps(self.to_payload(), ensure_ascii=False))

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        store: BlobStore,
        *,
        key: str = SESSION_KEY,
        default_area_label: str = DEFAULT_MAIN_AREA,
    ) -> "SurveySession":
        session = cls(store, key=key, default_area_label=default_area_label)
        session._load_payload(payload)
        return session

    @classmethod
    def restore(
        cls,
        store: BlobStore,
        *,
        key: str = SESSION_KEY,
        default_area_label: str = DEFAULT_MAIN_AREA,
    ) -> "SurveySession":
        session = cls(store, key=key, default_area_label=default_area_label)
        blob = store.load(key)
        if blob is None:
            return session
        try:
            session._load_payload(json.loads(blob))
        except (ValueError, TypeError, KeyError, OverflowError, RecursionError, ValidationError) as exc:
            log_event(
                session.logger,
                f"discarding malformed session blob: {exc}",
                level=logging.WARNING,
                event="SESSION_RESTORE",
                status="fallback",
                error_code="MALFORMED_SESSION",
            )
            return cls(store, key=key, default_area_label=default_area_label)
        log_event(
            session.logger,
            "session restored",
            event="SESSION_RESTORE",
            status="ok",
            area=session.area_label,
            rows_out=session.count(),
        )
        return session
