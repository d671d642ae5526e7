"""Item list extraction (持ち物, 持参物, 内容 sections)."""

import re

from ..keywords import DEFAULT_KEYWORDS, KeywordCatalog
from ..models import ExtractedItem, ItemCategory
from .text import clean_lines, split_header, strip_bullet

_SEPARATORS = re.compile(r"[、,，]")


def _split_nouns(value: str) -> list[str]:
    return [part.strip() for part in _SEPARATORS.split(value) if part.strip()]


def categorize_items(items: list[str] | tuple[str, ...], keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> ItemCategory:
    """First category (in catalog order) with a vocabulary term in any noun."""
    for category, terms in keywords.item_category_terms().items():
        if any(term in item for item in items for term in terms):
            return category
    return "other"


def section_confidence(items: list[str] | tuple[str, ...], keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> float:
    """0.6 for no recognized nouns, rising to 0.9 when every noun is recognized."""
    if not items:
        return 0.0
    terms = keywords.all_item_terms()
    matched = sum(1 for item in items if any(term in item for term in terms))
    return round(0.6 + 0.3 * matched / len(items), 4)


def extract_items(text: str, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> tuple[ExtractedItem, ...]:
    """Collect one ExtractedItem per list section.

    A section starts at a header line ("持ち物：" or "持ち物：水筒、帽子") and
    takes the bullet lines that follow until a blank or non-bullet line.
    """
    lines = clean_lines(text)
    sections: list[ExtractedItem] = []
    i = 0
    while i < len(lines):
        header = split_header(lines[i], keywords.item_headers)
        i += 1
        if header is None:
            continue

        _, inline = header
        nouns = _split_nouns(inline)
        source = [inline] if inline else []
        while i < len(lines):
            bullet = strip_bullet(lines[i])
            if not bullet:
                break
            nouns.extend(_split_nouns(bullet))
            source.append(bullet)
            i += 1

        if nouns:
            sections.append(ExtractedItem(
                text="、".join(source),
                items=tuple(nouns),
                confidence=section_confidence(nouns, keywords),
                category=categorize_items(nouns, keywords),
            ))
    return tuple(sections)
