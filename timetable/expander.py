"""Expansion of weekly course sessions into dated occurrences."""

from datetime import datetime, timedelta
from typing import Iterable

from loguru import logger

from .errors import ValidationError
from .models import CourseSession, Occurrence, OccurrenceDetail, Origin
from .timeparse import (
    TimeOfDay,
    at_time_of_day,
    parse_time_of_day,
    start_of_week,
    weekday_index,
)


class OccurrenceExpander:
    """Expands session templates into one occurrence per week.
    
    Weeks start on Sunday at midnight in the reference instant's time zone.
    Week 0 is the week containing the reference instant.
    """
    
    def __init__(self, window: int = 4) -> None:
        """Initialize the expander.
        
        Args:
            window: Number of weeks to expand, starting with the current one.
        """
        if window < 0:
            raise ValueError(f"Window must be non-negative, got {window}")
        self._window = window
    
    @property
    def window(self) -> int:
        return self._window
    
    @staticmethod
    def _duration(start: TimeOfDay, end: TimeOfDay) -> timedelta:
        # Hour and minute deltas are added independently, e.g. 09:50-11:10
        # is +2h then -40min.
        return timedelta(hours=end.hour - start.hour) + timedelta(minutes=end.minute - start.minute)
    
    def _title(self, session: CourseSession) -> str:
        return f"{session.course_name} - Lecture Hall {session.lecture_hall_name}"
    
    def _detail(self, session: CourseSession) -> OccurrenceDetail:
        return OccurrenceDetail(
            course_name=session.course_name,
            branch=session.branch,
            semester=session.semester,
            course_code=session.course_code,
            lecture_hall=session.lecture_hall_name,
            day_of_week=session.day_of_week,
            start_time=session.start_time,
            end_time=session.end_time,
        )
    
    def expand_session(self, session: CourseSession, reference: datetime) -> list[Occurrence]:
        """Expand a single session over the window.
        
        Args:
            session: The session template.
            reference: Instant anchoring week 0.
        
        Returns:
            One occurrence per week, in week order.
        
        Raises:
            ValidationError: If the weekday, a time, or the duration is invalid.
        """
        try:
            day_offset = weekday_index(session.day_of_week)
            start_time = parse_time_of_day(session.start_time)
            end_time = parse_time_of_day(session.end_time)
        except ValidationError as e:
            raise e.for_record(session.id, "session") from e
        
        duration = self._duration(start_time, end_time)
        if duration <= timedelta(0):
            raise ValidationError(
                f"end time {session.end_time} is not after start time {session.start_time}",
                record_id=session.id,
                record_kind="session",
            )
        
        week_start = start_of_week(reference)
        title = self._title(session)
        detail = self._detail(session)
        
        occurrences: list[Occurrence] = []
        for week in range(self._window):
            day = (week_start + timedelta(weeks=week, days=day_offset)).date()
            start = at_time_of_day(day, start_time, reference)
            occurrences.append(
                Occurrence(
                    id=f"{session.id}-{week}",
                    title=title,
                    start=start,
                    end=start + duration,
                    origin=Origin.ORIGINAL,
                    detail=detail,
                    session_id=session.id,
                )
            )
        
        return occurrences
    
    def expand(
        self,
        sessions: Iterable[CourseSession],
        reference: datetime
    ) -> tuple[list[Occurrence], list[ValidationError]]:
        """Expand every session, collecting failures instead of raising.
        
        Returns:
            Tuple of (occurrences, errors for sessions that were skipped).
        """
        occurrences: list[Occurrence] = []
        errors: list[ValidationError] = []
        
        for session in sessions:
            try:
                occurrences.extend(self.expand_session(session, reference))
            except ValidationError as e:
                logger.warning(f"Skipping session: {e}")
                errors.append(e)
        
        logger.debug(
            f"Expanded {len(occurrences)} occurrences over {self._window} weeks "
            f"({len(errors)} sessions skipped)"
        )
        return occurrences, errors
