"""Title extraction."""


def extract_title(text: str) -> str | None:
    """First non-blank line, trimmed of ASCII and fullwidth whitespace."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None
