"""Timetable engine: materializes class occurrences from weekly sessions and reschedules."""

from .assembler import TimetableAssembler, assemble
from .errors import ConflictError, TimetableError, ValidationError
from .expander import OccurrenceExpander
from .loader import load_exceptions, load_sessions
from .materializer import RescheduleMaterializer
from .models import (
    CourseSession,
    Occurrence,
    OccurrenceDetail,
    Origin,
    RescheduleException,
    TimetableDiagnostics,
    TimetableResult,
)
from .resolver import OverrideResolver
from .timeparse import TimeOfDay, parse_time_of_day

__all__ = [
    "ConflictError",
    "CourseSession",
    "Occurrence",
    "OccurrenceDetail",
    "OccurrenceExpander",
    "Origin",
    "OverrideResolver",
    "RescheduleException",
    "RescheduleMaterializer",
    "TimeOfDay",
    "TimetableAssembler",
    "TimetableDiagnostics",
    "TimetableError",
    "TimetableResult",
    "ValidationError",
    "assemble",
    "load_exceptions",
    "load_sessions",
    "parse_time_of_day",
]
