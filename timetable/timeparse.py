"""Parsing helpers for clock times, calendar dates and week boundaries."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from .errors import ValidationError

# Sunday-first, matching the week layout of the calendar widget
WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

# Databases hand back "HH:MM:SS"; seconds are accepted and dropped.
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


@dataclass(frozen=True)
class TimeOfDay:
    """Hour and minute parsed from a "HH:MM" string."""
    
    hour: int
    minute: int
    
    def as_time(self) -> time:
        return time(self.hour, self.minute)
    
    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time_of_day(value: str) -> TimeOfDay:
    """Parse a clock time like "09:00" or "9:00".
    
    Args:
        value: Time string in H:MM or HH:MM form.
    
    Returns:
        Parsed TimeOfDay.
    
    Raises:
        ValidationError: If the string is not a valid clock time.
    """
    if not isinstance(value, str):
        raise ValidationError(f"Time must be a string, got {value!r}")
    
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValidationError(f"Cannot parse time: {value!r}")
    
    hour, minute = map(int, match.groups())
    if hour > 23 or minute > 59:
        raise ValidationError(f"Time out of range: {value!r}")
    
    return TimeOfDay(hour, minute)


def weekday_index(day_name: str) -> int:
    """Return the Sunday-first index (0-6) of a weekday name."""
    if isinstance(day_name, str):
        normalized = day_name.strip().lower()
        if normalized in WEEKDAYS:
            return WEEKDAYS.index(normalized)
    raise ValidationError(f"Unknown day of week: {day_name!r}")


def parse_calendar_date(value: Union[str, date]) -> date:
    """Parse a calendar date.
    
    Accepts date objects, datetime objects (the time part is ignored) and
    ISO 8601 strings with or without a time component.
    
    Raises:
        ValidationError: If the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Cannot parse date: {value!r}")
    
    text = value.strip()
    try:
        if len(text) > 10:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Cannot parse date: {value!r}") from None


def start_of_week(reference: datetime) -> datetime:
    """Return midnight of the Sunday on or before the reference instant.
    
    The result keeps the reference's tzinfo (or lack of one).
    """
    days_since_sunday = (reference.weekday() + 1) % 7
    sunday = reference.date() - timedelta(days=days_since_sunday)
    return datetime.combine(sunday, time(0, 0), tzinfo=reference.tzinfo)


def at_time_of_day(day: date, time_of_day: TimeOfDay, reference: datetime) -> datetime:
    """Combine a date with a clock time in the reference instant's time zone."""
    return datetime.combine(day, time_of_day.as_time(), tzinfo=reference.tzinfo)
