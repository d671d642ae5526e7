"""Parse raw OCR text into ParsedContent - the heart of the pipeline."""

import logging

from .errors import Err, ParseError, Result
from .extract import (
    extract_dates,
    extract_items,
    extract_locations,
    extract_notes,
    extract_times,
    extract_title,
)
from .extract.dates import DEFAULT_YEAR
from .keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .models import ParsedContent
from .validation import validate_parsed_content

logger = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "解析するテキストが空です"


def average_confidence(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def parse_ocr_text(
    raw_text: str,
    ocr_confidence: float,
    keywords: KeywordCatalog = DEFAULT_KEYWORDS,
    default_year: int = DEFAULT_YEAR,
) -> Result:
    """Run every extractor over ``raw_text`` and validate the assembled content.

    Args:
        raw_text: Text returned by the OCR service.
        ocr_confidence: The service's own confidence, blended into the aggregate.
        keywords: Vocabulary used by the extractors.
        default_year: Year assumed for dates written without one.

    Returns:
        Ok(ParsedContent), or Err with a ParseError / ValidationError.
    """
    if not raw_text or not raw_text.strip():
        return Err(ParseError(EMPTY_TEXT_MESSAGE, raw_text or ""))

    try:
        dates = extract_dates(raw_text, keywords, default_year)
        times = extract_times(raw_text, keywords)
        items = extract_items(raw_text, keywords)
        content = ParsedContent(
            title=extract_title(raw_text),
            dates=dates,
            times=times,
            items=items,
            locations=extract_locations(raw_text, keywords),
            notes=extract_notes(raw_text, keywords),
            confidence=average_confidence(
                [d.confidence for d in dates]
                + [t.confidence for t in times]
                + [i.confidence for i in items]
                + [ocr_confidence]
            ),
        )
    except Exception as e:
        logger.warning(f"Unexpected fault while parsing OCR text: {e}")
        return Err(ParseError(f"テキスト解析中にエラーが発生しました: {e}", raw_text))

    logger.debug(
        f"Parsed '{content.title}': {len(content.dates)} date(s), {len(content.times)} time(s), "
        f"{len(content.items)} item group(s), confidence {content.confidence:.2f}"
    )
    return validate_parsed_content(content)
