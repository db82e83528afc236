"""Report compilation and dispatch message composition."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from hydrant_survey.common.constants import HYDRANT_TYPE
from hydrant_survey.common.time_utils import utc_now
from hydrant_survey.survey.models import HydrantRecord, SessionSnapshot

COORDINATE_PRECISION = 6

NARRATIVE_TEMPLATE = (
    "Based on the field survey conducted in the {area} district, {count_phrase} "
    "been strategically mapped to ensure maximum market coverage and rapid emergency response. "
    "The selected points are primarily located at critical entry and exit points of the "
    "high-density commercial zone.\n\n"
    "Fire safety justification: The high building density and narrow access routes in {area} "
    "necessitate a localized pillar-type hydrant network. Each proposed coordinate offers "
    "unobstructed access for fire tenders and ensures a reliable water source within a "
    "100-meter radius of any point in the primary bazar.\n\n"
    "Official Endorsement: This report serves as a formal proposal for the Civil Works "
    "department. The coordinates provided are accurate within ±5 meters based on "
    "real-time GPS synchronization."
)

DISPATCH_TEMPLATE = (
    "Hydrant Detail\n"
    "Station: {station_id}\n"
    "Location: {area}\n"
    "Longitude and Latitude:\n"
    "Lat {lat}°\n"
    "Long {lon}°\n"
    "Plus Code: {display_code}\n"
    "Proposed Hydrant location: {label}\n"
    "Hydrant type: {hydrant_type}"
)


@dataclass(frozen=True)
class ReportRow:
    index: int
    label: str
    latitude: str
    longitude: str
    display_code: str

    def as_cells(self) -> list[object]:
        return [self.index, self.label, self.latitude, self.longitude, self.display_code]


@dataclass(frozen=True)
class ReportModel:
    station_id: str
    area_label: str
    generated_at: datetime
    rows: tuple[ReportRow, ...]
    narrative: str

    @property
    def record_count(self) -> int:
        return len(self.rows)


def format_coordinate(value: float) -> str:
    return f"{value:.{COORDINATE_PRECISION}f}"


def _count_phrase(count: int) -> str:
    if count == 1:
        return "1 proposed fire hydrant location has"
    return f"{count} proposed fire hydrant locations have"


def build_narrative(area_label: str, count: int) -> str:
    return NARRATIVE_TEMPLATE.format(area=area_label, count_phrase=_count_phrase(count))


def compile_report(
    snapshot: SessionSnapshot,
    station_id: str,
    generated_at: datetime | None = None,
) -> ReportModel:
    rows = tuple(
        ReportRow(
            index=idx,
            label=record.label,
            latitude=format_coordinate(record.latitude),
            longitude=format_coordinate(record.longitude),
            display_code=record.display_code,
        )
        for idx, record in enumerate(snapshot.records, start=1)
    )
    return ReportModel(
        station_id=station_id,
        area_label=snapshot.area_label,
        generated_at=generated_at or utc_now(),
        rows=rows,
        narrative=build_narrative(snapshot.area_label, len(rows)),
    )


def compose_dispatch_message(station_id: str, area_label: str, record: HydrantRecord) -> str:
    return DISPATCH_TEMPLATE.format(
        station_id=station_id,
        area=area_label,
        lat=format_coordinate(record.latitude),
        lon=format_coordinate(record.longitude),
        display_code=record.display_code,
        label=record.label,
        hydrant_type=HYDRANT_TYPE,
    )
