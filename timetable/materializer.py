"""Materialization of reschedule exceptions into dated occurrences."""

from datetime import datetime, timedelta
from typing import Iterable

from loguru import logger

from .errors import ValidationError
from .models import Occurrence, OccurrenceDetail, Origin, RescheduleException
from .timeparse import at_time_of_day, parse_calendar_date, parse_time_of_day


class RescheduleMaterializer:
    """Turns each reschedule exception into exactly one occurrence."""
    
    # Exceptions do not record how long the moved class runs
    DEFAULT_DURATION = timedelta(hours=1)
    
    def __init__(self, default_duration: timedelta = DEFAULT_DURATION) -> None:
        if default_duration <= timedelta(0):
            raise ValueError("Default duration must be positive")
        self._default_duration = default_duration
    
    def _duration(self, exception: RescheduleException) -> timedelta:
        raw = exception.duration_minutes
        if raw is None or raw == "":
            return self._default_duration
        
        try:
            minutes = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(
                f"duration must be a whole number of minutes, got {raw!r}",
                record_id=exception.id,
                record_kind="exception",
            ) from None
        
        if minutes <= 0:
            raise ValidationError(
                f"duration must be positive, got {minutes} minutes",
                record_id=exception.id,
                record_kind="exception",
            )
        return timedelta(minutes=minutes)
    
    def materialize_one(self, exception: RescheduleException, reference: datetime) -> Occurrence:
        """Build the occurrence for a single exception.
        
        Args:
            exception: The reschedule exception.
            reference: Instant whose time zone the occurrence is placed in.
        
        Raises:
            ValidationError: If a date, the new time or the duration is invalid.
        """
        try:
            parse_calendar_date(exception.original_date)
            new_date = parse_calendar_date(exception.rescheduled_date)
            new_time = parse_time_of_day(exception.new_time)
        except ValidationError as e:
            raise e.for_record(exception.id, "exception") from e
        
        start = at_time_of_day(new_date, new_time, reference)
        end = start + self._duration(exception)
        
        return Occurrence(
            id=f"rescheduled-{exception.id}",
            title=f"{exception.course_name} (Rescheduled) - Lecture Hall {exception.lecture_hall_name}",
            start=start,
            end=end,
            origin=Origin.RESCHEDULED,
            detail=OccurrenceDetail(
                course_name=exception.course_name,
                branch=exception.branch,
                semester=exception.semester,
                course_code=exception.course_code,
                lecture_hall=exception.lecture_hall_name,
                original_date=str(exception.original_date),
                rescheduled_date=str(exception.rescheduled_date),
                new_time=exception.new_time,
                reason=exception.reason,
            ),
            session_id=exception.original_session_id,
        )
    
    def materialize(
        self,
        exceptions: Iterable[RescheduleException],
        reference: datetime
    ) -> tuple[list[Occurrence], list[ValidationError]]:
        """Materialize every exception, collecting failures instead of raising.
        
        Returns:
            Tuple of (occurrences, errors for exceptions that were skipped).
        """
        occurrences: list[Occurrence] = []
        errors: list[ValidationError] = []
        
        for exception in exceptions:
            try:
                occurrences.append(self.materialize_one(exception, reference))
            except ValidationError as e:
                logger.warning(f"Skipping reschedule: {e}")
                errors.append(e)
        
        logger.debug(f"Materialized {len(occurrences)} rescheduled occurrences")
        return occurrences, errors
