"""Tests for building records from timetable API rows."""

import json

import pytest

from timetable import assemble
from timetable.loader import (
    exception_from_row,
    exceptions_from_payload,
    load_exceptions,
    load_sessions,
    session_from_row,
    sessions_from_payload,
)

API_SESSION = {
    "id": 12,
    "day_of_week": "monday",
    "start_time": "09:00:00",
    "end_time": "10:00:00",
    "courses": {"course_name": "Algorithms", "course_code": "CS301", "branch": "ECE", "semester": 3},
    "lecture_halls": {"hall_name": "A1"},
}

API_EXCEPTION = {
    "id": 5,
    "original_date": "2024-12-23",
    "rescheduled_date": "2024-12-25",
    "new_time": "14:00",
    "reason": "holiday",
    "courses": {"course_name": "Algorithms", "course_code": "CS301", "branch": "ECE", "semester": 3},
    "lecture_halls": {"hall_name": "B2"},
}


def test_session_from_nested_row():
    session = session_from_row(API_SESSION)

    assert session.id == "12"
    assert session.course_name == "Algorithms"
    assert session.course_code == "CS301"
    assert session.semester == "3"
    assert session.lecture_hall_name == "A1"
    assert session.start_time == "09:00:00"


def test_session_from_flat_row():
    session = session_from_row({
        "id": "s1",
        "course_name": "Databases",
        "lecture_hall_name": "C3",
        "day_of_week": "friday",
        "start_time": "11:00",
        "end_time": "12:30",
    })
    assert session.course_name == "Databases"
    assert session.lecture_hall_name == "C3"
    assert session.branch == ""


def test_exception_from_nested_row():
    exception = exception_from_row(API_EXCEPTION)

    assert exception.id == "5"
    assert exception.lecture_hall_name == "B2"
    assert exception.course_code == "CS301"
    assert exception.original_session_id is None
    assert exception.duration_minutes is None


def test_exception_optional_fields():
    exception = exception_from_row({**API_EXCEPTION, "original_session_id": 12, "duration_minutes": "90"})
    assert exception.original_session_id == "12"
    assert exception.duration_minutes == "90"


def test_bad_duration_fails_only_its_record(sunday):
    rows = [API_EXCEPTION, {**API_EXCEPTION, "id": 6, "original_date": "2024-12-30", "duration_minutes": "1h"}]
    exceptions = exceptions_from_payload(rows)
    assert [x.id for x in exceptions] == ["5", "6"]

    result = assemble([session_from_row(API_SESSION)], exceptions, window=2, reference_instant=sunday)

    assert {o.id for o in result} == {"12-1", "rescheduled-5"}
    assert result.diagnostics.failed_exception_ids == ("6",)


def test_row_without_id_rejected():
    with pytest.raises(ValueError, match="without an id"):
        session_from_row({"day_of_week": "monday"})


def test_payload_wrappers():
    assert len(sessions_from_payload({"classes": [API_SESSION]})) == 1
    assert len(exceptions_from_payload({"rescheduled_classes": [API_EXCEPTION]})) == 1
    assert len(sessions_from_payload([API_SESSION, {**API_SESSION, "id": 13}])) == 2


@pytest.mark.parametrize("payload", [{"classes": None}, "nope", [1, 2]])
def test_malformed_payload_rejected(payload):
    with pytest.raises(ValueError):
        sessions_from_payload(payload)


def test_load_from_files(tmp_path):
    sessions_path = tmp_path / "classes.json"
    exceptions_path = tmp_path / "reschedules.json"
    sessions_path.write_text(json.dumps({"classes": [API_SESSION]}), encoding="utf-8")
    exceptions_path.write_text(json.dumps([API_EXCEPTION]), encoding="utf-8")

    assert load_sessions(sessions_path)[0].id == "12"
    assert load_exceptions(exceptions_path)[0].id == "5"


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_sessions(path)
