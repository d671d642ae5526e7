"""Location extraction from labelled lines and the location vocabulary."""

from ..keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .text import has_content, split_header


def extract_locations(text: str, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> tuple[str, ...]:
    """Distinct locations in first-seen order.

    Values of labelled lines ("場所：上野動物園") are taken whole; vocabulary
    terms found inside such a value are not reported again.
    """
    found: list[tuple[int, str]] = []
    covered: list[tuple[int, int]] = []

    offset = 0
    for raw_line in text.splitlines(keepends=True):
        header = split_header(raw_line.strip(), keywords.location_labels)
        if header and header[1] and has_content(header[1]):
            value = header[1]
            start = raw_line.find(value)
            if start >= 0:
                found.append((offset + start, value))
                covered.append((offset + start, offset + start + len(value)))
        offset += len(raw_line)

    for term in keywords.locations:
        pos = text.find(term)
        while pos >= 0:
            if not any(start <= pos < end for start, end in covered):
                found.append((pos, term))
                break
            pos = text.find(term, pos + 1)

    locations: list[str] = []
    for _, value in sorted(found, key=lambda entry: entry[0]):
        if value not in locations:
            locations.append(value)
    return tuple(locations)
