"""Note extraction: ※ lines and caveat sections such as 注意事項."""

from ..keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .text import clean_lines, split_header, strip_bullet


def _add(notes: list[str], note: str) -> None:
    if note and note not in notes:
        notes.append(note)


def extract_notes(text: str, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> tuple[str, ...]:
    notes: list[str] = []
    lines = clean_lines(text)
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if line.startswith("※"):
            _add(notes, line.lstrip("※").strip())
            continue

        header = split_header(line, keywords.note_headers)
        if header is None:
            continue
        _add(notes, header[1])
        while i < len(lines):
            bullet = strip_bullet(lines[i])
            if bullet is None and lines[i].startswith("※"):
                bullet = lines[i].lstrip("※").strip()
            if not bullet:
                break
            _add(notes, bullet)
            i += 1
    return tuple(notes)
