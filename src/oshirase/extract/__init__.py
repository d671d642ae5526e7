"""Extractors for the parts of a notice."""

from .dates import extract_dates, format_date, parse_date
from .items import extract_items
from .locations import extract_locations
from .notes import extract_notes
from .times import extract_times
from .title import extract_title

__all__ = [
    "extract_dates",
    "extract_items",
    "extract_locations",
    "extract_notes",
    "extract_times",
    "extract_title",
    "format_date",
    "parse_date",
]
