import csv
import json
from datetime import datetime, timezone
from pathlib import Path

from hydrant_survey.report.compiler import compile_report
from hydrant_survey.report.export import (
    TABLE_COLUMNS,
    build_report_document,
    report_filename,
    write_report,
)
from hydrant_survey.survey.models import Coordinate, HydrantRecord, SessionSnapshot


def _model():
    record = HydrantRecord(
        id="a",
        label="Near Main Gate",
        coordinate=Coordinate(32.18644, 74.19079),
        display_code="004F+A0, Main  Bazar, Gujranwala, Punjab, Pakistan",
        created_at=1000,
    )
    snapshot = SessionSnapshot(area_label="Main  Bazar", configured=True, records=(record,))
    return compile_report(snapshot, "RS-02", generated_at=datetime(2026, 2, 17, tzinfo=timezone.utc))


def test_report_filename_collapses_whitespace():
    assert report_filename("Shaheenabad  Main Bazar", "json") == "Hydrant_Survey_Shaheenabad_Main_Bazar.json"


def test_build_report_document_sections():
    document = build_report_document(_model())

    assert document["title"] == "Fire Hydrant Survey Report"
    assert document["metadata"] == [
        "Station ID: RS-02 | Main Area: Main  Bazar",
        "Total Proposed Hydrants: 1 | Date: 2026-02-17",
    ]
    assert document["table"]["columns"] == TABLE_COLUMNS
    assert document["table"]["rows"] == [
        [1, "Near Main Gate", "32.186440", "74.190790", "004F+A0, Main  Bazar, Gujranwala, Punjab, Pakistan"]
    ]
    assert document["narrative"]["heading"] == "Professional Technical Summary"
    assert len(document["narrative"]["paragraphs"]) == 3
    assert document["footer"] == "Generated via Official Field Survey Tool - RS-02 Unit"


def test_write_report_json_and_csv(tmp_path: Path):
    model = _model()

    json_path = write_report(model, tmp_path, "json")
    csv_path = write_report(model, tmp_path, "csv")

    assert json_path.name == "Hydrant_Survey_Main_Bazar.json"
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["table"]["rows"][0][2] == "32.186440"

    with csv_path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == TABLE_COLUMNS
    assert rows[1][:4] == ["1", "Near Main Gate", "32.186440", "74.190790"]
