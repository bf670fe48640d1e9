"""Resolution of reschedule exceptions against expanded original occurrences."""

from collections import defaultdict
from datetime import date
from typing import Sequence

from loguru import logger

from .errors import ConflictError
from .models import Occurrence, RescheduleException
from .timeparse import parse_calendar_date


class OverrideResolver:
    """Removes originals superseded by a reschedule and adds the reschedules.
    
    An exception supersedes an original occurrence on its original date. When
    the exception names the session it moves (``original_session_id``) the
    match is on that id. Otherwise the course name must appear in the
    occurrence title, which is how stored exceptions have always been matched.
    """
    
    @staticmethod
    def _target(exception: RescheduleException) -> tuple[str, str, date]:
        original_date = parse_calendar_date(exception.original_date)
        if exception.original_session_id is not None:
            return ("session", exception.original_session_id, original_date)
        return ("course", exception.course_name, original_date)
    
    @classmethod
    def check_conflicts(cls, exceptions: Sequence[RescheduleException]) -> None:
        """Raise if two exceptions name the same target on the same date.
        
        The target is the session id when the exception carries one, else the
        course name.
        
        Raises:
            ConflictError: For the first duplicated target.
        """
        targets: dict[tuple[str, str, date], list[RescheduleException]] = defaultdict(list)
        for exception in exceptions:
            targets[cls._target(exception)].append(exception)
        
        for (_, _, original_date), claimants in targets.items():
            if len(claimants) > 1:
                raise ConflictError(
                    claimants[0].course_name,
                    original_date,
                    [x.id for x in claimants],
                )
    
    @staticmethod
    def supersedes(exception: RescheduleException, occurrence: Occurrence) -> bool:
        """Check whether an exception replaces the given original occurrence."""
        if occurrence.start.date() != parse_calendar_date(exception.original_date):
            return False
        if exception.original_session_id is not None:
            return occurrence.session_id == exception.original_session_id
        return exception.course_name in occurrence.title
    
    def resolve(
        self,
        originals: Sequence[Occurrence],
        rescheduled: Sequence[Occurrence],
        exceptions: Sequence[RescheduleException]
    ) -> tuple[list[Occurrence], list[str]]:
        """Filter superseded originals and union them with the reschedules.
        
        Args:
            originals: Occurrences expanded from session templates.
            rescheduled: Occurrences materialized from the exceptions.
            exceptions: The exceptions the reschedules were built from.
        
        Returns:
            Tuple of (combined occurrences, ids of exceptions that matched no
            original). Unmatched exceptions keep their rescheduled occurrence.
        
        Raises:
            ConflictError: If two exceptions target the same original.
        """
        self.check_conflicts(exceptions)
        
        # original occurrence id -> exception that removed it
        removed: dict[str, RescheduleException] = {}
        unmatched: list[str] = []
        
        for exception in exceptions:
            matches = [o.id for o in originals if self.supersedes(exception, o)]
            if not matches:
                logger.info(
                    f"Reschedule {exception.id} for {exception.course_name!r} on "
                    f"{exception.original_date} matches no original occurrence"
                )
                unmatched.append(exception.id)
                continue
            if len(matches) > 1:
                logger.warning(
                    f"Reschedule {exception.id} replaces {len(matches)} occurrences: {', '.join(matches)}"
                )
            for occurrence_id in matches:
                claimant = removed.get(occurrence_id)
                if claimant is not None:
                    raise ConflictError(
                        exception.course_name,
                        parse_calendar_date(exception.original_date),
                        [claimant.id, exception.id],
                    )
                removed[occurrence_id] = exception
        
        kept = [o for o in originals if o.id not in removed]
        logger.debug(f"Removed {len(removed)} superseded occurrences, {len(unmatched)} reschedules unmatched")
        return kept + list(rescheduled), unmatched
