"""Data models for captured survey records."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def is_valid_lat_lon(lat: Any, lon: Any) -> bool:
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return is_valid_lat_lon(self.latitude, self.longitude)


@dataclass(frozen=True)
class HydrantRecord:
    """One captured hydrant proposal.

    ``display_code`` is the encoded fragment joined with the area and
    regional suffix, exactly as persisted under ``plusCode``.
    """

    id: str
    label: str
    coordinate: Coordinate
    display_code: str
    created_at: int

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "proposedLocation": self.label,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "plusCode": self.display_code,
            "timestamp": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "HydrantRecord":
        if not isinstance(payload, dict):
            raise TypeError("hydrant entry must be an object")
        record_id = payload["id"]
        label = payload["proposedLocation"]
        display_code = payload["plusCode"]
        timestamp = payload["timestamp"]
        for name, value in (("id", record_id), ("proposedLocation", label), ("plusCode", display_code)):
            if not isinstance(value, str):
                raise TypeError(f"hydrant field {name} must be a string")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
            raise TypeError("hydrant field timestamp must be a finite number")
        return cls(
            id=record_id,
            label=label,
            coordinate=Coordinate(latitude=payload["latitude"], longitude=payload["longitude"]),
            display_code=display_code,
            created_at=int(timestamp),
        )


@dataclass(frozen=True)
class SessionSnapshot:
    area_label: str
    configured: bool
    records: tuple[HydrantRecord, ...]

    @property
    def count(self) -> int:
        return len(self.records)
