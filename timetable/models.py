"""Data models for course sessions, reschedule exceptions and occurrences."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .errors import ValidationError


@dataclass(frozen=True)
class CourseSession:
    """A recurring weekly class meeting.
    
    Fields hold the raw text supplied by the storage collaborator. They are
    validated when the session is expanded, so one bad record never prevents
    the rest of a batch from being materialized.
    """
    
    id: str
    course_code: str
    course_name: str
    branch: str
    semester: str
    lecture_hall_name: str
    day_of_week: str  # "sunday".."saturday"
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"


@dataclass(frozen=True)
class RescheduleException:
    """A one-off move of a single session occurrence to a new date and time."""
    
    id: str
    course_name: str
    branch: str
    semester: str
    lecture_hall_name: str
    original_date: str
    rescheduled_date: str
    new_time: str
    reason: str = field(default="")
    course_code: str = field(default="")
    original_session_id: Optional[str] = field(default=None)
    duration_minutes: Optional[Union[int, str]] = field(default=None)  # raw, validated on materialize


class Origin(str, Enum):
    """Where an occurrence came from."""
    
    ORIGINAL = "original"
    RESCHEDULED = "rescheduled"


@dataclass(frozen=True)
class OccurrenceDetail:
    """Descriptive fields shown when an occurrence is opened in the calendar."""
    
    course_name: str
    branch: str
    semester: str
    course_code: str
    lecture_hall: str
    day_of_week: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    original_date: Optional[str] = None
    rescheduled_date: Optional[str] = None
    new_time: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class Occurrence:
    """A concrete, dated calendar entry."""
    
    id: str
    title: str
    start: datetime
    end: datetime
    origin: Origin
    detail: OccurrenceDetail
    session_id: Optional[str] = None
    
    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValidationError(f"Occurrence {self.id} must end after it starts")
    
    @property
    def sort_key(self) -> tuple[datetime, str]:
        return (self.start, self.id)


@dataclass(frozen=True)
class TimetableDiagnostics:
    """Records that were skipped or could not be matched during assembly."""
    
    failed_session_ids: tuple[str, ...] = ()
    failed_exception_ids: tuple[str, ...] = ()
    unmatched_exception_ids: tuple[str, ...] = ()
    errors: tuple[ValidationError, ...] = ()
    
    @property
    def skipped_count(self) -> int:
        return len(self.failed_session_ids) + len(self.failed_exception_ids)
    
    @property
    def has_failures(self) -> bool:
        return self.skipped_count > 0


@dataclass(frozen=True)
class TimetableResult:
    """Sorted occurrences plus diagnostics about skipped records."""
    
    occurrences: tuple[Occurrence, ...]
    diagnostics: TimetableDiagnostics = field(default_factory=TimetableDiagnostics)
    
    def __len__(self) -> int:
        return len(self.occurrences)
    
    def __iter__(self):
        return iter(self.occurrences)
