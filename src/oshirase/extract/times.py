"""Time extraction: 午前/午後 idioms, HH:MM, and bare 時 hours."""

import logging
import re
from dataclasses import dataclass

from ..keywords import DEFAULT_KEYWORDS, KeywordCatalog
from ..models import ExtractedTime, TimeType
from .text import NUMBER, line_bounds, normalize, same_line, select_longest, to_int

logger = logging.getLogger(__name__)

_SP = r"[ \t]*"
_MINUTES = rf"(?:{_SP}(?:({NUMBER}){_SP}分|(半)))?"

MERIDIEM_RE = re.compile(rf"(午前|午後){_SP}({NUMBER}){_SP}時{_MINUTES}")
NOON_RE = re.compile(r"正午")
COLON_RE = re.compile(r"(?<![0-9])([0-9]{1,2}):([0-9]{2})(?![0-9])")
BARE_HOUR_RE = re.compile(rf"(?<![0-9〇一二三四五六七八九十])({NUMBER}){_SP}時(?![間的期]){_MINUTES}")
# A kanji hour with no minutes reads as a word (一時預かり) unless a range or 頃 follows.
_KANJI_HOUR_FOLLOW = re.compile(rf"{_SP}(?:〜|～|~|-|から|より|まで|頃|ごろ)")


@dataclass(frozen=True)
class TimeMatch:
    start: int
    end: int
    hour: int
    minute: int
    confidence: float
    format: str

    @property
    def value(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def _minutes(m: re.Match, group: int) -> int | None:
    if m.group(group + 1):  # 半
        return 30
    if m.group(group):
        return to_int(m.group(group))
    return 0


def _valid(hour: int | None, minute: int | None) -> bool:
    return hour is not None and minute is not None and 0 <= hour <= 23 and 0 <= minute <= 59


def match_meridiem(text: str, pos: int = 0) -> TimeMatch | None:
    """``午前9時30分`` / ``午後3時`` / ``午後3時半``, converted to 24-hour."""
    for m in MERIDIEM_RE.finditer(text, pos):
        hour = to_int(m.group(2))
        minute = _minutes(m, 3)
        if hour is None or hour > 12:
            continue
        if m.group(1) == "午後" and hour != 12:
            hour += 12
        elif m.group(1) == "午前" and hour == 12:
            hour = 0
        if _valid(hour, minute):
            return TimeMatch(m.start(), m.end(), hour, minute, 0.9, "meridiem")
    return None


def match_noon(text: str, pos: int = 0) -> TimeMatch | None:
    m = NOON_RE.search(text, pos)
    if m is None:
        return None
    return TimeMatch(m.start(), m.end(), 12, 0, 0.85, "noon")


def match_colon(text: str, pos: int = 0) -> TimeMatch | None:
    """``13:45`` (already 24-hour)."""
    for m in COLON_RE.finditer(text, pos):
        hour, minute = int(m.group(1)), int(m.group(2))
        if _valid(hour, minute):
            return TimeMatch(m.start(), m.end(), hour, minute, 0.95, "colon")
    return None


def match_bare_hour(text: str, pos: int = 0) -> TimeMatch | None:
    """``10時`` with no meridiem; taken as written."""
    for m in BARE_HOUR_RE.finditer(text, pos):
        hour = to_int(m.group(1))
        minute = _minutes(m, 2)
        if not m.group(1).isdigit() and m.group(2) is None and m.group(3) is None:
            if not _KANJI_HOUR_FOLLOW.match(text, m.end()):
                continue
        if _valid(hour, minute):
            return TimeMatch(m.start(), m.end(), hour, minute, 0.75, "bare_hour")
    return None


TIME_MATCHERS = (match_meridiem, match_noon, match_colon, match_bare_hour)


def find_time_matches(text: str) -> list[TimeMatch]:
    """All time matches in normalized ``text``, overlaps resolved, in text order."""
    candidates: list[TimeMatch] = []
    for matcher in TIME_MATCHERS:
        pos = 0
        while (found := matcher(text, pos)) is not None:
            candidates.append(found)
            pos = found.end
    return select_longest(candidates)


def _labelled_type(prefix: str, keywords: KeywordCatalog, allow_end: bool) -> TimeType | None:
    """Type announced by the label nearest before a time (開始, 終了, 締切)."""
    best: tuple[int, TimeType] | None = None
    for kind, labels in keywords.time_markers.items():
        if kind == "end_time" and not allow_end:
            continue
        for label in labels:
            at = prefix.rfind(label)
            if at >= 0 and (best is None or at > best[0]):
                best = (at, kind)
    return best[1] if best else None


def _time_type(
    text: str,
    match: TimeMatch,
    previous: TimeMatch | None,
    keywords: KeywordCatalog,
) -> TimeType:
    line_start, line_end = line_bounds(text, match.start)
    prefix = text[line_start:match.start]
    if previous is not None and same_line(text, previous.end, match.start):
        prefix = text[previous.end:match.start]
        if any(marker in prefix for marker in keywords.range_markers):
            return "end_time"
    labelled = _labelled_type(prefix, keywords, allow_end=previous is not None)
    if labelled is not None:
        return labelled
    if text[match.end:line_end].strip().startswith("まで"):
        return "deadline"
    return "start_time"


def extract_times(text: str, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> tuple[ExtractedTime, ...]:
    """Extract times in order of appearance."""
    normalized = normalize(text)
    matches = find_time_matches(normalized)

    times = []
    previous = None
    for match in matches:
        times.append(ExtractedTime(
            text=text[match.start:match.end],
            time=match.value,
            confidence=match.confidence,
            type=_time_type(normalized, match, previous, keywords),
        ))
        previous = match

    logger.debug(f"Extracted {len(times)} time(s)")
    return tuple(times)
