"""Capture flow: one open capture at a time, committed as a single record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from hydrant_survey.common.config_loader import AreaSuffix
from hydrant_survey.common.errors import DispatchError, InvalidStateError, LocationError, ValidationError
from hydrant_survey.common.ids import generate_record_id
from hydrant_survey.common.logging import get_logger, log_event
from hydrant_survey.common.time_utils import epoch_millis
from hydrant_survey.report.compiler import compose_dispatch_message
from hydrant_survey.survey.dispatch import DispatchSink
from hydrant_survey.survey.location import LocationProvider
from hydrant_survey.survey.location_code import compose_display_code, encode
from hydrant_survey.survey.models import Coordinate, HydrantRecord
from hydrant_survey.survey.session import SurveySession


@dataclass(frozen=True)
class CaptureResult:
    record: HydrantRecord
    message: str
    dispatched: bool


class CaptureFlow:
    def __init__(
        self,
        session: SurveySession,
        provider: LocationProvider,
        sink: DispatchSink,
        *,
        station_id: str,
        suffix: AreaSuffix,
        timeout_seconds: float = 10.0,
        clock: Callable[[], int] = epoch_millis,
        id_factory: Callable[[], str] = generate_record_id,
    ) -> None:
        self.session = session
        self.provider = provider
        self.sink = sink
        self.station_id = station_id
        self.suffix = suffix
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.id_factory = id_factory
        self.logger = get_logger()
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def begin(self) -> None:
        if not self.session.configured:
            raise InvalidStateError("Set up the survey area before capturing hydrants")
        if self._in_progress:
            raise InvalidStateError("A capture is already in progress")
        try:
            self.provider.request_coordinate(self.timeout_seconds)
        except LocationError as exc:
            self._log_location_failure(exc, stage="begin")
            raise
        self._in_progress = True

    def cancel(self) -> None:
        self._in_progress = False

    def commit(self, label: str) -> CaptureResult:
        if not self._in_progress:
            raise InvalidStateError("No capture in progress")
        if not label or not label.strip():
            raise ValidationError("Please enter a proposed location name.")

        try:
            coordinate = self.provider.request_coordinate(self.timeout_seconds)
        except LocationError as exc:
            self._in_progress = False
            self._log_location_failure(exc, stage="commit")
            raise

        try:
            return self._commit_coordinate(label.strip(), coordinate)
        finally:
            self._in_progress = False

    def _commit_coordinate(self, label: str, coordinate: Coordinate) -> CaptureResult:
        if not coordinate.is_valid():
            raise ValidationError(
                f"Location fix out of range: {coordinate.latitude}, {coordinate.longitude}"
            )

        area_label = self.session.area_label
        display_code = compose_display_code(
            encode(coordinate),
            area_label,
            self.suffix.locality,
            self.suffix.region,
            self.suffix.country,
        )
        record = HydrantRecord(
            id=self.id_factory(),
            label=label,
            coordinate=coordinate,
            display_code=display_code,
            created_at=self.session.next_timestamp(self.clock()),
        )
        self.session.capture(record)

        message = compose_dispatch_message(self.station_id, area_label, record)
        return CaptureResult(record=record, message=message, dispatched=self._dispatch(record, message))

    def capture(self, label: str) -> CaptureResult:
        self.begin()
        try:
            return self.commit(label)
        finally:
            self.cancel()

    def _dispatch(self, record: HydrantRecord, message: str) -> bool:
        try:
            self.sink.send(message)
        except DispatchError as exc:
            log_event(
                self.logger,
                f"dispatch failed: {exc}",
                level=logging.WARNING,
                event="DISPATCH",
                status="error",
                record_id=record.id,
                error_code=exc.error_code,
            )
            return False
        log_event(self.logger, "dispatch sent", event="DISPATCH", status="ok", record_id=record.id)
        return True

    def _log_location_failure(self, exc: LocationError, *, stage: str) -> None:
        log_event(
            self.logger,
            f"location request failed during {stage}: {exc}",
            level=logging.WARNING,
            event="LOCATION_REQUEST",
            status="error",
            error_code=exc.error_code,
        )
