"""JSON transformer producing events for a web calendar widget."""

import json
from typing import Any, Optional

from timetable.models import Occurrence, OccurrenceDetail, TimetableDiagnostics, TimetableResult
from .base import BaseTransformer

# Detail attribute -> key expected by the calendar widget
_DETAIL_KEYS = {
    "course_name": "courseName",
    "branch": "branch",
    "semester": "semester",
    "course_code": "courseCode",
    "lecture_hall": "lectureHall",
    "day_of_week": "dayOfWeek",
    "start_time": "startTime",
    "end_time": "endTime",
    "original_date": "originalDate",
    "rescheduled_date": "rescheduledDate",
    "new_time": "newTime",
    "reason": "reason",
}


class JSONTransformer(BaseTransformer):
    """Transformer that renders occurrences as plain JSON-ready dictionaries.
    
    Each event carries ``id``, ``title``, ``start``, ``end``, ``origin`` and a
    ``details`` object; detail fields that do not apply are omitted.
    """
    
    def __init__(self, indent: Optional[int] = 2) -> None:
        self._document: Optional[dict[str, Any]] = None
        self._indent = indent
    
    @staticmethod
    def _details(detail: OccurrenceDetail) -> dict[str, Any]:
        return {
            key: getattr(detail, attr)
            for attr, key in _DETAIL_KEYS.items()
            if getattr(detail, attr) is not None
        }
    
    def _event(self, occurrence: Occurrence) -> dict[str, Any]:
        return {
            "id": occurrence.id,
            "title": occurrence.title,
            "start": occurrence.start.isoformat(),
            "end": occurrence.end.isoformat(),
            "origin": occurrence.origin.value,
            "details": self._details(occurrence.detail),
        }
    
    @staticmethod
    def _diagnostics(diagnostics: TimetableDiagnostics) -> dict[str, Any]:
        return {
            "failedSessionIds": list(diagnostics.failed_session_ids),
            "failedExceptionIds": list(diagnostics.failed_exception_ids),
            "unmatchedExceptionIds": list(diagnostics.unmatched_exception_ids),
            "skippedCount": diagnostics.skipped_count,
            "errors": [str(e) for e in diagnostics.errors],
        }
    
    def transform(self, result: TimetableResult) -> dict[str, Any]:
        """Transform an assembled timetable into a JSON-ready document.
        
        Args:
            result: Sorted occurrences and diagnostics from the assembler.
        
        Returns:
            Dictionary with ``events`` and ``diagnostics`` keys.
        """
        self._document = {
            "events": [self._event(o) for o in result.occurrences],
            "diagnostics": self._diagnostics(result.diagnostics),
        }
        return self._document
    
    def save(self, output_path: str) -> None:
        """Save the document to a .json file.
        
        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._document is None:
            raise RuntimeError("No timetable data. Call transform() first.")
        
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self._document, f, indent=self._indent, ensure_ascii=False)
