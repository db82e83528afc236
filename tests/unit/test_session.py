import json
from pathlib import Path

import pytest

from hydrant_survey.common.constants import DEFAULT_MAIN_AREA, SESSION_KEY
from hydrant_survey.common.errors import InvalidStateError, StorageError, ValidationError
from hydrant_survey.survey.models import Coordinate, HydrantRecord
from hydrant_survey.survey.session import SurveySession
from hydrant_survey.survey.storage import JsonFileBlobStore, MemoryBlobStore


def _record(record_id: str, label: str = "Near Main Gate", ts: int = 1000):
    return HydrantRecord(
        id=record_id,
        label=label,
        coordinate=Coordinate(32.18644, 74.19079),
        display_code="004F+A0, Main Bazar, Gujranwala, Punjab, Pakistan",
        created_at=ts,
    )


def test_new_session_is_unconfigured_with_default_area():
    session = SurveySession(MemoryBlobStore())
    assert session.configured is False
    assert session.area_label == DEFAULT_MAIN_AREA
    assert session.count() == 0


def test_setup_blank_area_falls_back_to_default():
    store = MemoryBlobStore()
    session = SurveySession(store, default_area_label="Default Bazar")

    session.setup("   ")

    assert session.configured is True
    assert session.area_label == "Default Bazar"
    assert json.loads(store.blobs[SESSION_KEY])["isSetupDone"] is True


def test_setup_twice_is_rejected():
    session = SurveySession(MemoryBlobStore())
    session.setup("Main Bazar")
    with pytest.raises(InvalidStateError):
        session.setup("Other Bazar")
    assert session.area_label == "Main Bazar"


def test_capture_before_setup_raises_and_does_not_mutate():
    store = MemoryBlobStore()
    session = SurveySession(store)

    with pytest.raises(InvalidStateError):
        session.capture(_record("a"))

    assert session.count() == 0
    assert store.blobs == {}


def test_capture_persists_after_each_record():
    store = MemoryBlobStore()
    session = SurveySession(store)
    session.setup("Main Bazar")

    session.capture(_record("a", ts=1000))
    session.capture(_record("b", label="Clock Tower", ts=2000))

    payload = json.loads(store.blobs[SESSION_KEY])
    assert payload["mainAreaLocation"] == "Main Bazar"
    assert [h["proposedLocation"] for h in payload["hydrants"]] == ["Near Main Gate", "Clock Tower"]
    assert payload["hydrants"][0] == {
        "id": "a",
        "proposedLocation": "Near Main Gate",
        "latitude": 32.18644,
        "longitude": 74.19079,
        "plusCode": "004F+A0, Main Bazar, Gujranwala, Punjab, Pakistan",
        "timestamp": 1000,
    }


def test_capture_validation_failure_leaves_registry_unchanged():
    session = SurveySession(MemoryBlobStore())
    session.setup("Main Bazar")
    with pytest.raises(ValidationError):
        session.capture(_record("a", label=" "))
    assert session.count() == 0


def test_reset_clears_records_and_configuration():
    store = MemoryBlobStore()
    session = SurveySession(store)
    session.setup("Main Bazar")
    session.capture(_record("a"))
    session.capture(_record("b"))

    session.reset()

    assert session.configured is False
    assert session.count() == 0
    assert session.area_label == DEFAULT_MAIN_AREA
    assert json.loads(store.blobs[SESSION_KEY]) == {
        "mainAreaLocation": DEFAULT_MAIN_AREA,
        "hydrants": [],
        "isSetupDone": False,
    }


def test_snapshot_is_read_only():
    session = SurveySession(MemoryBlobStore())
    session.setup("Main Bazar")
    session.capture(_record("a"))

    snapshot = session.snapshot()

    assert isinstance(snapshot.records, tuple)
    with pytest.raises(AttributeError):
        snapshot.area_label = "changed"
    with pytest.raises(AttributeError):
        snapshot.records[0].label = "changed"
    assert snapshot.count == 1


def test_round_trip_restores_state(tmp_path: Path):
    store = JsonFileBlobStore(tmp_path / "state")
    session = SurveySession(store)
    session.setup("Main Bazar")
    session.capture(_record("a", ts=1000))
    session.capture(_record("b", label="Clock Tower", ts=1500))

    restored = SurveySession.restore(JsonFileBlobStore(tmp_path / "state"))

    assert restored.area_label == "Main Bazar"
    assert restored.configured is True
    assert restored.records() == session.records()


def test_from_payload_builds_session():
    payload = {
        "mainAreaLocation": "Main Bazar",
        "hydrants": [_record("a").to_dict()],
        "isSetupDone": True,
    }
    session = SurveySession.from_payload(payload, MemoryBlobStore())
    assert session.records() == [_record("a")]


@pytest.mark.parametrize(
    "blob",
    [
        "{not json",
        "[]",
        json.dumps({"mainAreaLocation": "X", "hydrants": []}),
        json.dumps({"mainAreaLocation": 5, "hydrants": [], "isSetupDone": True}),
        json.dumps({"mainAreaLocation": "X", "hydrants": {}, "isSetupDone": True}),
        json.dumps({"mainAreaLocation": "X", "hydrants": [{"id": "a"}], "isSetupDone": True}),
        json.dumps(
            {
                "mainAreaLocation": "X",
                "hydrants": [dict(_record("a").to_dict(), latitude=123.0)],
                "isSetupDone": True,
            }
        ),
        '{"mainAreaLocation": "X", "isSetupDone": true, "hydrants": [{"id": "a", "proposedLocation": "Gate", '
        '"latitude": 1.0, "longitude": 2.0, "plusCode": "004F+A0", "timestamp": 1e400}]}',
        "[" * 100000 + "]" * 100000,
    ],
)
def test_restore_falls_back_on_malformed_blob(blob):
    session = SurveySession.restore(MemoryBlobStore({SESSION_KEY: blob}), default_area_label="Fallback")
    assert session.configured is False
    assert session.area_label == "Fallback"
    assert session.count() == 0


def test_restore_without_blob_returns_default():
    session = SurveySession.restore(MemoryBlobStore())
    assert session.configured is False
    assert session.count() == 0


def test_next_timestamp_never_goes_backwards():
    session = SurveySession(MemoryBlobStore())
    session.setup("Main Bazar")
    assert session.next_timestamp(500) == 500
    session.capture(_record("a", ts=1000))
    assert session.next_timestamp(900) == 1000
    assert session.next_timestamp(1200) == 1200


class _FailingStore(MemoryBlobStore):
    def save(self, key, blob):
        raise StorageError("disk full")


def test_write_failure_surfaces_without_rollback():
    session = SurveySession(_FailingStore())
    with pytest.raises(StorageError):
        session.setup("Main Bazar")
    assert session.configured is True
    assert session.area_label == "Main Bazar"
