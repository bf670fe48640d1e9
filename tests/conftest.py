"""Shared fixtures for timetable tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from timetable.models import CourseSession, RescheduleException

WARSAW = ZoneInfo("Europe/Warsaw")


@pytest.fixture
def sunday() -> datetime:
    """Sunday 22 December 2024, mid-morning."""
    return datetime(2024, 12, 22, 10, 30, tzinfo=WARSAW)


@pytest.fixture
def make_session():
    """Factory for sessions with sensible defaults."""

    def _make(**overrides) -> CourseSession:
        fields = {
            "id": "1",
            "course_code": "CS301",
            "course_name": "Algorithms",
            "branch": "ECE",
            "semester": "3",
            "lecture_hall_name": "A1",
            "day_of_week": "monday",
            "start_time": "09:00",
            "end_time": "10:00",
        }
        fields.update(overrides)
        return CourseSession(**fields)

    return _make


@pytest.fixture
def make_exception():
    """Factory for reschedule exceptions with sensible defaults."""

    def _make(**overrides) -> RescheduleException:
        fields = {
            "id": "1",
            "course_name": "Algorithms",
            "branch": "ECE",
            "semester": "3",
            "lecture_hall_name": "B2",
            "original_date": "2024-12-23",
            "rescheduled_date": "2024-12-25",
            "new_time": "14:00",
            "reason": "holiday",
        }
        fields.update(overrides)
        return RescheduleException(**fields)

    return _make
