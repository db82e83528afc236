"""Report document assembly and file export."""

from __future__ import annotations

import re
from pathlib import Path

from hydrant_survey.common.fs import write_csv_rows, write_json
from hydrant_survey.common.time_utils import format_report_date
from hydrant_survey.report.compiler import ReportModel

REPORT_TITLE = "Fire Hydrant Survey Report"
NARRATIVE_HEADING = "Professional Technical Summary"
TABLE_COLUMNS = ["#", "Proposed Location", "Latitude", "Longitude", "Plus Code"]
REPORT_FORMATS = ("json", "csv")

_WHITESPACE_RE = re.compile(r"\s+")


def report_filename(area_label: str, extension: str) -> str:
    return f"Hydrant_Survey_{_WHITESPACE_RE.sub('_', area_label)}.{extension}"


def build_report_document(model: ReportModel) -> dict:
    return {
        "header_band": True,
        "title": REPORT_TITLE,
        "metadata": [
            f"Station ID: {model.station_id} | Main Area: {model.area_label}",
            f"Total Proposed Hydrants: {model.record_count} | Date: {format_report_date(model.generated_at)}",
        ],
        "table": {
            "columns": list(TABLE_COLUMNS),
            "rows": [row.as_cells() for row in model.rows],
        },
        "narrative": {
            "heading": NARRATIVE_HEADING,
            "paragraphs": model.narrative.split("\n\n"),
        },
        "footer": f"Generated via Official Field Survey Tool - {model.station_id} Unit",
    }


def write_report_json(model: ReportModel, out_dir: Path) -> Path:
    out_path = out_dir / report_filename(model.area_label, "json")
    write_json(out_path, build_report_document(model))
    return out_path


def write_report_csv(model: ReportModel, out_dir: Path) -> Path:
    out_path = out_dir / report_filename(model.area_label, "csv")
    write_csv_rows(out_path, TABLE_COLUMNS, (row.as_cells() for row in model.rows))
    return out_path


def write_report(model: ReportModel, out_dir: Path, fmt: str = "json") -> Path:
    if fmt == "csv":
        return write_report_csv(model, out_dir)
    return write_report_json(model, out_dir)
