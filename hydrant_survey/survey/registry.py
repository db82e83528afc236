"""Append-only registry of captured hydrant records."""

from __future__ import annotations

from hydrant_survey.common.errors import ValidationError
from hydrant_survey.survey.models import HydrantRecord


class RecordRegistry:
    """Ordered, write-once collection of records, oldest first."""

    def __init__(self) -> None:
        self._records: list[HydrantRecord] = []
        self._ids: set[str] = set()

    def add(self, record: HydrantRecord) -> None:
        if not isinstance(record.label, str) or not record.label.strip():
            raise ValidationError("Proposed location label must not be empty")
        if not record.coordinate.is_valid():
            raise ValidationError(
                f"Coordinate out of range: {record.coordinate.latitude}, {record.coordinate.longitude}"
            )
        if not record.id or record.id in self._ids:
            raise ValidationError(f"Duplicate or empty record id: {record.id!r}")
        if self._records and record.created_at < self._records[-1].created_at:
            raise ValidationError("Record timestamp is earlier than the last captured record")

        self._records.append(record)
        self._ids.add(record.id)

    def list(self) -> list[HydrantRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
        self._ids.clear()

    def count(self) -> int:
        return len(self._records)

    def last_timestamp(self) -> int | None:
        if not self._records:
            return None
        return self._records[-1].created_at

    def __len__(self) -> int:
        return len(self._records)
