"""Assembly of the final timetable from sessions and reschedule exceptions."""

from datetime import datetime, timedelta
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from loguru import logger

from .errors import ValidationError
from .expander import OccurrenceExpander
from .materializer import RescheduleMaterializer
from .models import (
    CourseSession,
    RescheduleException,
    TimetableDiagnostics,
    TimetableResult,
)
from .resolver import OverrideResolver


class TimetableAssembler:
    """Builds a sorted timetable of class occurrences.
    
    Sessions are expanded over the window, exceptions are materialized, and
    every exception then supersedes the original it moves. Records that fail
    validation are skipped and reported in the result's diagnostics.
    """
    
    DEFAULT_WINDOW = 4
    DEFAULT_TIMEZONE = ZoneInfo("UTC")
    
    def __init__(
        self,
        window: int = DEFAULT_WINDOW,
        timezone: ZoneInfo = DEFAULT_TIMEZONE,
        reschedule_duration: timedelta = RescheduleMaterializer.DEFAULT_DURATION
    ) -> None:
        """Initialize the assembler.
        
        Args:
            window: Number of weeks to expand (default: 4).
            timezone: Time zone used when no reference instant is given.
            reschedule_duration: Length of a rescheduled class when the
                exception does not carry its own duration.
        """
        self._expander = OccurrenceExpander(window)
        self._materializer = RescheduleMaterializer(reschedule_duration)
        self._resolver = OverrideResolver()
        self._timezone = timezone
    
    def assemble(
        self,
        sessions: Sequence[CourseSession],
        exceptions: Sequence[RescheduleException],
        reference_instant: Optional[datetime] = None
    ) -> TimetableResult:
        """Assemble the timetable.
        
        Args:
            sessions: Weekly session templates.
            exceptions: One-off reschedule exceptions.
            reference_instant: Instant anchoring the current week. Defaults
                to now in the configured time zone.
        
        Returns:
            TimetableResult with occurrences sorted by start, then id.
        
        Raises:
            ConflictError: If two exceptions target the same original.
        """
        if reference_instant is None:
            reference_instant = datetime.now(self._timezone)
        
        originals, session_errors = self._expander.expand(sessions, reference_instant)
        rescheduled, exception_errors = self._materializer.materialize(exceptions, reference_instant)
        
        # Only exceptions that produced an occurrence may remove an original
        failed_exceptions = {e.record_id for e in exception_errors}
        applied = [x for x in exceptions if x.id not in failed_exceptions]
        
        combined, unmatched = self._resolver.resolve(originals, rescheduled, applied)
        combined.sort(key=lambda o: o.sort_key)
        
        diagnostics = self._diagnostics(session_errors, exception_errors, unmatched)
        if diagnostics.has_failures:
            logger.warning(f"Timetable assembled with {diagnostics.skipped_count} skipped records")
        logger.debug(f"Assembled {len(combined)} occurrences from {reference_instant.isoformat()}")
        
        return TimetableResult(occurrences=tuple(combined), diagnostics=diagnostics)
    
    @staticmethod
    def _diagnostics(
        session_errors: list[ValidationError],
        exception_errors: list[ValidationError],
        unmatched: list[str]
    ) -> TimetableDiagnostics:
        return TimetableDiagnostics(
            failed_session_ids=tuple(e.record_id for e in session_errors),
            failed_exception_ids=tuple(e.record_id for e in exception_errors),
            unmatched_exception_ids=tuple(unmatched),
            errors=tuple(session_errors + exception_errors),
        )


def assemble(
    sessions: Sequence[CourseSession],
    exceptions: Sequence[RescheduleException],
    window: int = TimetableAssembler.DEFAULT_WINDOW,
    reference_instant: Optional[datetime] = None
) -> TimetableResult:
    """Assemble a timetable with default settings.
    
    See TimetableAssembler.assemble().
    """
    return TimetableAssembler(window=window).assemble(sessions, exceptions, reference_instant)
