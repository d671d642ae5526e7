"""Date extraction for Japanese notices.

Each supported format has its own matcher returning the next match at or
after ``pos`` (or None). ``extract_dates`` runs every matcher, keeps the
longest match where spans overlap, and tags each date with a type taken
from its line context.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from ..keywords import DEFAULT_KEYWORDS, KeywordCatalog
from ..models import DateType, ExtractedDate
from .text import NUMBER, line_bounds, normalize, same_line, select_longest, to_int

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2025

ERA_OFFSETS = {"令和": 2018, "平成": 1988}

_SP = r"[ \t]*"
_WEEKDAY = rf"(?:{_SP}[（(]{_SP}[月火水木金土日](?:曜日?)?{_SP}[）)])?"

MONTH_DAY_RE = re.compile(rf"(?<![0-9])({NUMBER}){_SP}月{_SP}({NUMBER}){_SP}日{_WEEKDAY}")
ERA_RE = re.compile(
    rf"(令和|平成){_SP}({NUMBER}|元){_SP}年{_SP}({NUMBER}){_SP}月{_SP}({NUMBER}){_SP}日{_WEEKDAY}"
)
GREGORIAN_RE = re.compile(
    rf"(?<![0-9])([0-9]{{4}}){_SP}年{_SP}({NUMBER}){_SP}月{_SP}({NUMBER}){_SP}日{_WEEKDAY}"
)
GREGORIAN_SLASH_RE = re.compile(rf"(?<![0-9/])([0-9]{{4}})/([0-9]{{1,2}})/([0-9]{{1,2}})(?![0-9/]){_WEEKDAY}")
ISO_RE = re.compile(r"(?<![0-9])([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})(?![0-9])")
SLASH_RE = re.compile(rf"(?<![0-9/])([0-9]{{1,2}})/([0-9]{{1,2}})(?![0-9/]){_WEEKDAY}")


@dataclass(frozen=True)
class DateMatch:
    start: int
    end: int
    value: date
    confidence: float
    format: str


def _make_date(year: int | None, month: int | None, day: int | None) -> date | None:
    if year is None or month is None or day is None:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _search(pattern: re.Pattern, text: str, pos: int, build: Callable) -> DateMatch | None:
    for m in pattern.finditer(text, pos):
        found = build(m)
        if found is not None:
            return found
    return None


def match_month_day(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``3月15日（金）`` / ``3月15日``, year assumed to be ``default_year``."""
    def build(m):
        value = _make_date(default_year, to_int(m.group(1)), to_int(m.group(2)))
        return value and DateMatch(m.start(), m.end(), value, 0.9, "month_day")
    return _search(MONTH_DAY_RE, text, pos, build)


def match_era_date(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``令和7年4月20日`` converted to the Gregorian calendar."""
    def build(m):
        era_year = to_int(m.group(2))
        if not era_year:
            return None
        year = ERA_OFFSETS[m.group(1)] + era_year
        value = _make_date(year, to_int(m.group(3)), to_int(m.group(4)))
        return value and DateMatch(m.start(), m.end(), value, 0.88, "era")
    return _search(ERA_RE, text, pos, build)


def match_gregorian(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``2025年5月10日``."""
    def build(m):
        value = _make_date(int(m.group(1)), to_int(m.group(2)), to_int(m.group(3)))
        return value and DateMatch(m.start(), m.end(), value, 0.95, "gregorian")
    return _search(GREGORIAN_RE, text, pos, build)


def match_gregorian_slash(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``2025/5/10``."""
    def build(m):
        value = _make_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        return value and DateMatch(m.start(), m.end(), value, 0.95, "gregorian_slash")
    return _search(GREGORIAN_SLASH_RE, text, pos, build)


def match_iso(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``2025-05-10``, so normalized output parses back to itself."""
    def build(m):
        value = _make_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        return value and DateMatch(m.start(), m.end(), value, 0.95, "iso")
    return _search(ISO_RE, text, pos, build)


def match_slash(text: str, pos: int = 0, default_year: int = DEFAULT_YEAR) -> DateMatch | None:
    """``6/25`` shorthand, year assumed to be ``default_year``."""
    def build(m):
        value = _make_date(default_year, int(m.group(1)), int(m.group(2)))
        return value and DateMatch(m.start(), m.end(), value, 0.8, "slash")
    return _search(SLASH_RE, text, pos, build)


DATE_MATCHERS = (
    match_era_date,
    match_gregorian,
    match_gregorian_slash,
    match_iso,
    match_month_day,
    match_slash,
)


def find_date_matches(text: str, default_year: int = DEFAULT_YEAR) -> list[DateMatch]:
    """All date matches in normalized ``text``, overlaps resolved, in text order."""
    candidates: list[DateMatch] = []
    for matcher in DATE_MATCHERS:
        pos = 0
        while (found := matcher(text, pos, default_year)) is not None:
            candidates.append(found)
            pos = found.end
    return select_longest(candidates)


def parse_date(value: str, default_year: int = DEFAULT_YEAR) -> date | None:
    """Parse the first date expression in ``value``."""
    matches = find_date_matches(normalize(value), default_year)
    return matches[0].value if matches else None


def format_date(value: date) -> str:
    return value.isoformat()


def _date_type(
    text: str,
    match: DateMatch,
    previous: DateMatch | None,
    keywords: KeywordCatalog,
) -> DateType:
    if previous is not None and same_line(text, previous.end, match.start):
        gap = text[previous.end:match.start]
        if any(marker in gap for marker in keywords.range_markers):
            return "end_date"
    line_start, line_end = line_bounds(text, match.start)
    prefix = text[line_start:match.start]
    suffix = text[match.end:line_end].strip()
    if any(marker in prefix for marker in keywords.due_markers) or suffix.startswith("まで"):
        return "due_date"
    if any(marker in prefix for marker in keywords.reference_markers):
        return "reference"
    return "start_date"


def extract_dates(
    text: str,
    keywords: KeywordCatalog = DEFAULT_KEYWORDS,
    default_year: int = DEFAULT_YEAR,
) -> tuple[ExtractedDate, ...]:
    """Extract dates in order of appearance."""
    normalized = normalize(text)
    matches = find_date_matches(normalized, default_year)

    dates = []
    previous = None
    for match in matches:
        dates.append(ExtractedDate(
            text=text[match.start:match.end],
            date=format_date(match.value),
            confidence=match.confidence,
            type=_date_type(normalized, match, previous, keywords),
        ))
        previous = match

    logger.debug(f"Extracted {len(dates)} date(s)")
    return tuple(dates)
