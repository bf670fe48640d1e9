"""Tests for materializing reschedule exceptions."""

from datetime import datetime, timedelta

import pytest

from timetable.errors import ValidationError
from timetable.materializer import RescheduleMaterializer
from timetable.models import Origin


def test_exception_becomes_one_hour_occurrence(make_exception, sunday):
    occurrence = RescheduleMaterializer().materialize_one(make_exception(), sunday)

    assert occurrence.id == "rescheduled-1"
    assert occurrence.origin is Origin.RESCHEDULED
    assert occurrence.title == "Algorithms (Rescheduled) - Lecture Hall B2"
    assert occurrence.start == datetime(2024, 12, 25, 14, 0, tzinfo=sunday.tzinfo)
    assert occurrence.end == datetime(2024, 12, 25, 15, 0, tzinfo=sunday.tzinfo)


def test_detail_records_the_move(make_exception, sunday):
    detail = RescheduleMaterializer().materialize_one(make_exception(course_code="CS301"), sunday).detail

    assert detail.original_date == "2024-12-23"
    assert detail.rescheduled_date == "2024-12-25"
    assert detail.new_time == "14:00"
    assert detail.reason == "holiday"
    assert detail.course_code == "CS301"
    assert detail.day_of_week is None


def test_carried_duration_overrides_default(make_exception, sunday):
    occurrence = RescheduleMaterializer().materialize_one(make_exception(duration_minutes=90), sunday)
    assert occurrence.end - occurrence.start == timedelta(minutes=90)


def test_duration_from_text_row(make_exception, sunday):
    occurrence = RescheduleMaterializer().materialize_one(make_exception(duration_minutes="90"), sunday)
    assert occurrence.end - occurrence.start == timedelta(minutes=90)


def test_blank_duration_uses_default(make_exception, sunday):
    occurrence = RescheduleMaterializer().materialize_one(make_exception(duration_minutes=""), sunday)
    assert occurrence.end - occurrence.start == timedelta(hours=1)


def test_configured_default_duration(make_exception, sunday):
    materializer = RescheduleMaterializer(default_duration=timedelta(minutes=45))
    occurrence = materializer.materialize_one(make_exception(), sunday)
    assert occurrence.end - occurrence.start == timedelta(minutes=45)


def test_session_id_carried_for_matching(make_exception, sunday):
    occurrence = RescheduleMaterializer().materialize_one(make_exception(original_session_id="42"), sunday)
    assert occurrence.session_id == "42"


@pytest.mark.parametrize(
    "overrides",
    [
        {"new_time": "2pm"},
        {"rescheduled_date": "next week"},
        {"original_date": ""},
        {"duration_minutes": 0},
        {"duration_minutes": "1h"},
    ],
)
def test_invalid_exception_raises(make_exception, sunday, overrides):
    with pytest.raises(ValidationError) as exc_info:
        RescheduleMaterializer().materialize_one(make_exception(id="9", **overrides), sunday)
    assert exc_info.value.record_id == "9"
    assert exc_info.value.record_kind == "exception"


def test_materialize_collects_failures(make_exception, sunday):
    exceptions = [make_exception(id="1"), make_exception(id="2", new_time="14")]
    occurrences, errors = RescheduleMaterializer().materialize(exceptions, sunday)

    assert [o.id for o in occurrences] == ["rescheduled-1"]
    assert [e.record_id for e in errors] == ["2"]


def test_non_positive_default_duration_rejected():
    with pytest.raises(ValueError):
        RescheduleMaterializer(default_duration=timedelta(0))
