"""iCalendar transformer for timetable occurrences."""

import hashlib
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event

from timetable.models import Occurrence, Origin, TimetableResult
from .base import BaseTransformer


class ICalTransformer(BaseTransformer):
    """Transformer that writes each occurrence as a standalone VEVENT.
    
    Occurrences are already expanded, so no RRULE is emitted. Reschedules
    appear as ordinary events on their new date.
    """
    
    UID_DOMAIN = "timetable.local"
    
    def __init__(self, calendar_name: str = "Timetable", stamp: Optional[datetime] = None) -> None:
        """Initialize the iCalendar transformer.
        
        Args:
            calendar_name: Value of X-WR-CALNAME.
            stamp: DTSTAMP written on every event. Defaults to the time of
                transform(); pass a fixed value for reproducible output.
        """
        self._calendar: Optional[Calendar] = None
        self._calendar_name = calendar_name
        self._stamp = stamp
    
    def _generate_uid(self, occurrence: Occurrence) -> str:
        """Generate a stable identifier for an occurrence.
        
        Args:
            occurrence: The occurrence.
        
        Returns:
            Unique identifier string.
        """
        unique_string = f"{occurrence.id}-{occurrence.start.isoformat()}"
        return hashlib.md5(unique_string.encode()).hexdigest() + f"@{self.UID_DOMAIN}"
    
    def _description(self, occurrence: Occurrence) -> str:
        detail = occurrence.detail
        lines = [f"Course code: {detail.course_code}"] if detail.course_code else []
        if detail.branch or detail.semester:
            lines.append(f"Branch: {detail.branch}, semester: {detail.semester}")
        if occurrence.origin is Origin.RESCHEDULED:
            lines.append(f"Originally on: {detail.original_date}")
            if detail.reason:
                lines.append(f"Reason: {detail.reason}")
        return "\n".join(lines)
    
    def _to_event(self, occurrence: Occurrence, stamp: datetime) -> Event:
        ical_event = Event()
        ical_event.add("uid", self._generate_uid(occurrence))
        ical_event.add("dtstart", occurrence.start)
        ical_event.add("dtend", occurrence.end)
        ical_event.add("dtstamp", stamp)
        ical_event.add("summary", occurrence.title)
        
        if occurrence.detail.lecture_hall:
            ical_event.add("location", occurrence.detail.lecture_hall)
        
        description = self._description(occurrence)
        if description:
            ical_event.add("description", description)
        
        ical_event.add("categories", [occurrence.origin.value])
        return ical_event
    
    def transform(self, result: TimetableResult) -> Calendar:
        """Transform an assembled timetable into iCalendar format.
        
        Args:
            result: Sorted occurrences and diagnostics from the assembler.
        
        Returns:
            iCalendar Calendar object.
        """
        stamp = self._stamp or datetime.now(ZoneInfo("UTC"))
        
        self._calendar = Calendar()
        self._calendar.add("prodid", "-//Timetable materializer//timetable2iCal//EN")
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", self._calendar_name)
        
        for occurrence in result.occurrences:
            self._calendar.add_component(self._to_event(occurrence, stamp))
        
        return self._calendar
    
    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.
        
        Args:
            output_path: Path to the output file.
        
        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        
        with open(output_path, "wb") as f:
            f.write(self._calendar.to_ical())
