"""Transformer module for rendering assembled timetables in various output formats."""

from .base import BaseTransformer
from .ical_transformer import ICalTransformer
from .json_transformer import JSONTransformer

__all__ = ["BaseTransformer", "ICalTransformer", "JSONTransformer"]
