"""Exceptions raised by the timetable engine."""

from datetime import date
from typing import Optional


class TimetableError(Exception):
    """Base class for timetable engine errors."""


class ValidationError(TimetableError, ValueError):
    """A single session or exception record could not be materialized.
    
    Validation errors are scoped to one record. The assembler collects them
    into diagnostics instead of aborting the whole batch.
    """
    
    def __init__(
        self,
        message: str,
        record_id: Optional[str] = None,
        record_kind: Optional[str] = None
    ) -> None:
        self.record_id = record_id
        self.record_kind = record_kind
        if record_kind and record_id is not None:
            message = f"{record_kind} {record_id}: {message}"
        super().__init__(message)
    
    def for_record(self, record_id: str, record_kind: str) -> "ValidationError":
        """Return a copy of this error bound to the given record."""
        return ValidationError(str(self), record_id=record_id, record_kind=record_kind)


class ConflictError(TimetableError):
    """Two reschedule exceptions target the same original occurrence."""
    
    def __init__(self, course_name: str, original_date: date, exception_ids: list[str]) -> None:
        self.course_name = course_name
        self.original_date = original_date
        self.exception_ids = exception_ids
        ids = ", ".join(exception_ids)
        super().__init__(
            f"Exceptions {ids} all reschedule {course_name!r} on {original_date.isoformat()}"
        )
