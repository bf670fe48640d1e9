"""Builds engine records from rows returned by the timetable API."""

import json
from pathlib import Path
from typing import Any, Union

from .models import CourseSession, RescheduleException

# Payload keys used by the timetable and reschedule endpoints
SESSIONS_KEY = "classes"
EXCEPTIONS_KEY = "rescheduled_classes"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _course_fields(row: dict[str, Any]) -> dict[str, str]:
    """Read course and hall fields from a nested or a flat row.
    
    API rows nest the joined tables, e.g.
    ``{"courses": {"course_name": ...}, "lecture_halls": {"hall_name": ...}}``.
    """
    course = row.get("courses") or {}
    hall = row.get("lecture_halls") or {}
    return {
        "course_code": _text(course.get("course_code", row.get("course_code"))),
        "course_name": _text(course.get("course_name", row.get("course_name"))),
        "branch": _text(course.get("branch", row.get("branch"))),
        "semester": _text(course.get("semester", row.get("semester"))),
        "lecture_hall_name": _text(hall.get("hall_name", row.get("lecture_hall_name"))),
    }


def _require_id(row: dict[str, Any], kind: str) -> str:
    if row.get("id") is None:
        raise ValueError(f"{kind} record without an id: {row!r}")
    return str(row["id"])


def session_from_row(row: dict[str, Any]) -> CourseSession:
    """Build a CourseSession from an API row."""
    return CourseSession(
        id=_require_id(row, "session"),
        day_of_week=_text(row.get("day_of_week")),
        start_time=_text(row.get("start_time")),
        end_time=_text(row.get("end_time")),
        **_course_fields(row),
    )


def exception_from_row(row: dict[str, Any]) -> RescheduleException:
    """Build a RescheduleException from an API row."""
    session_id = row.get("original_session_id", row.get("session_id"))
    return RescheduleException(
        id=_require_id(row, "exception"),
        original_date=_text(row.get("original_date")),
        rescheduled_date=_text(row.get("rescheduled_date")),
        new_time=_text(row.get("new_time")),
        reason=_text(row.get("reason")),
        original_session_id=None if session_id is None else str(session_id),
        duration_minutes=row.get("duration_minutes"),
        **_course_fields(row),
    )


def _rows(payload: Any, key: str) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
        raise ValueError(f"Expected a list of records or an object with a {key!r} list")
    return payload


def sessions_from_payload(payload: Any) -> list[CourseSession]:
    """Build sessions from a list of rows or a ``{"classes": [...]}`` payload."""
    return [session_from_row(row) for row in _rows(payload, SESSIONS_KEY)]


def exceptions_from_payload(payload: Any) -> list[RescheduleException]:
    """Build exceptions from a list of rows or a ``{"rescheduled_classes": [...]}`` payload."""
    return [exception_from_row(row) for row in _rows(payload, EXCEPTIONS_KEY)]


def _read_json(path: Union[str, Path]) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e


def load_sessions(path: Union[str, Path]) -> list[CourseSession]:
    """Load sessions from a JSON export file."""
    return sessions_from_payload(_read_json(path))


def load_exceptions(path: Union[str, Path]) -> list[RescheduleException]:
    """Load reschedule exceptions from a JSON export file."""
    return exceptions_from_payload(_read_json(path))
