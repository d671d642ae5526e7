"""Text helpers shared by the extractors."""

import re

# One-to-one character mapping, so spans in the normalized text index the raw text too.
_HALFWIDTH = {ord(c): ord("0") + i for i, c in enumerate("０１２３４５６７８９")}
_HALFWIDTH.update({ord("　"): ord(" "), ord("："): ord(":"), ord("／"): ord("/")})

KANJI_DIGITS = {"〇": 0, "一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9}

# Arabic or kanji numeral up to two digits (三十一 is the longest needed).
NUMBER = r"(?:[0-9]{1,2}|[〇一二三四五六七八九十]{1,3})"

BULLET_RE = re.compile(r"^(?:[・･\-‐－*•]|[0-9０-９]{1,2}[.)．、]|[①-⑳])\s*(.*)$")


def normalize(text: str) -> str:
    """Map fullwidth digits, space, colon and slash to ASCII."""
    return text.translate(_HALFWIDTH)


def to_int(value: str) -> int | None:
    """Parse an arabic or kanji numeral such as "12", "十二" or "二十五"."""
    if value.isascii() and value.isdigit():
        return int(value)
    if value == "元":
        return 1
    if "十" in value:
        tens, _, ones = value.partition("十")
        if len(tens) > 1 or len(ones) > 1:
            return None
        high = KANJI_DIGITS.get(tens, 0) if tens else 1
        low = KANJI_DIGITS.get(ones, 0) if ones else 0
        if (tens and tens not in KANJI_DIGITS) or (ones and ones not in KANJI_DIGITS):
            return None
        return high * 10 + low
    if len(value) == 1 and value in KANJI_DIGITS:
        return KANJI_DIGITS[value]
    return None


def line_bounds(text: str, pos: int) -> tuple[int, int]:
    """Start and end offsets of the line containing ``pos``."""
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    return start, len(text) if end == -1 else end


def same_line(text: str, a: int, b: int) -> bool:
    return "\n" not in text[min(a, b):max(a, b)]


def clean_lines(text: str) -> list[str]:
    """Lines with surrounding ASCII and fullwidth whitespace removed."""
    return [line.strip() for line in text.splitlines()]


def strip_bullet(line: str) -> str | None:
    """Return the content of a bullet line, or None if it is not one."""
    match = BULLET_RE.match(line)
    if not match:
        return None
    return match.group(1).strip()


def split_header(line: str, headers: tuple[str, ...]) -> tuple[str, str] | None:
    """Match ``line`` against header words like "持ち物：".

    Returns (header, inline remainder) when the line starts with one of
    ``headers`` (optionally decorated with ◆■●【 and the like) followed by
    a colon or the end of the line.
    """
    body = line.lstrip("◆◇■□●○【[").strip()
    for header in sorted(headers, key=len, reverse=True):
        if not body.startswith(header):
            continue
        rest = body[len(header):].lstrip("】] ").strip()
        if not rest:
            return header, ""
        if rest[0] in ":：":
            return header, rest[1:].strip()
    return None


def has_content(value: str) -> bool:
    return any(ch.isalnum() for ch in value)


def select_longest(matches: list) -> list:
    """Resolve overlapping spans left to right, preferring the longest match.

    Each element needs ``start`` and ``end`` attributes. Matches that overlap
    an already selected span are dropped.
    """
    ordered = sorted(matches, key=lambda m: (m.start, -(m.end - m.start)))
    selected: list = []
    for match in ordered:
        if selected and match.start < selected[-1].end:
            continue
        selected.append(match)
    return selected
