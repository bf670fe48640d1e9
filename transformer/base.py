"""Abstract base class for timetable transformers."""

from abc import ABC, abstractmethod
from typing import Any

from timetable.models import TimetableResult


class BaseTransformer(ABC):
    """Abstract base class defining the interface for timetable transformers.
    
    Extend this class to render an assembled timetable into other output
    formats (e.g., iCalendar, JSON for a calendar widget, CSV).
    """
    
    @abstractmethod
    def transform(self, result: TimetableResult) -> Any:
        """Transform an assembled timetable into the target format.
        
        Args:
            result: Sorted occurrences and diagnostics from the assembler.
        
        Returns:
            Transformed data in the target format.
        """
        pass
    
    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.
        
        Args:
            output_path: Path to the output file.
        """
        pass
