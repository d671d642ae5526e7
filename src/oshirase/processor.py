"""OCR result processing - commands in, OcrResult records out."""

import hashlib
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any

from .config import get_thresholds, load_keywords
from .domain import convert_to_activity_domain
from .errors import Err, Ok, ProcessingError, Result
from .extract.dates import DEFAULT_YEAR
from .keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .models import (
    Activity,
    ConfidenceThresholds,
    OcrResult,
    ProcessOcrCommand,
    ProcessingStatus,
    ReviewOcrCommand,
    today,
)
from .parser import parse_ocr_text
from .storage.base import OcrRepository
from .synthesis import convert_to_activities
from .validation import (
    validate_confidence_thresholds,
    validate_ocr_result,
    validate_parsed_content,
    validate_process_command,
    validate_review_command,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".txt", ".text"}

_CONFIDENCE_HEADER = re.compile(r"^#\s*confidence\s*[:=]\s*([0-9]*\.?[0-9]+)\s*$", re.IGNORECASE)


def compute_hash(content: str) -> str:
    """SHA256 hash of content, used for stable result ids."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def status_for(confidence: float, thresholds: ConfidenceThresholds) -> ProcessingStatus:
    if confidence < thresholds.min_acceptable:
        return "failed"
    if confidence < thresholds.review_required:
        return "needs_review"
    return "completed"


def process_command(
    command: ProcessOcrCommand,
    keywords: KeywordCatalog = DEFAULT_KEYWORDS,
    thresholds: ConfidenceThresholds = ConfidenceThresholds(),
    default_year: int = DEFAULT_YEAR,
    result_id: str | None = None,
) -> Result:
    """Parse and synthesize one OCR text into an OcrResult."""
    validated = validate_process_command(command)
    if validated.is_err():
        return validated
    checked = validate_confidence_thresholds(thresholds)
    if checked.is_err():
        return checked

    parsed = parse_ocr_text(command.raw_text, command.confidence, keywords, default_year)
    if parsed.is_err():
        return parsed
    content = parsed.value

    activities = convert_to_activities(content, keywords)
    if activities.is_err():
        return activities

    result = OcrResult(
        id=result_id or compute_hash(f"{command.image_id}\n{command.raw_text}")[:16],
        image_id=command.image_id,
        raw_text=command.raw_text,
        confidence=content.confidence,
        parsed_content=content,
        extracted_activities=activities.value,
        processing_status=status_for(content.confidence, thresholds),
    )
    logger.info(f"Processed {command.image_id}: {result.processing_status} ({result.confidence:.2f})")
    return validate_ocr_result(result)


def approve_activities(
    result: OcrResult,
    thresholds: ConfidenceThresholds = ConfidenceThresholds(),
    reviewed: bool = False,
) -> Result:
    """Convert activities of a confident, completed result into Activity records.

    Results below ``auto_approve`` are left for the review workflow and yield
    an empty tuple. A ``reviewed`` result skips the confidence gate.
    """
    checked = validate_confidence_thresholds(thresholds)
    if checked.is_err():
        return checked
    if result.processing_status != "completed":
        return Ok(())
    if not reviewed and result.confidence < thresholds.auto_approve:
        return Ok(())

    converted: list[Activity] = []
    for activity in result.extracted_activities:
        domain = convert_to_activity_domain(activity, result.id)
        if domain.is_err():
            return domain
        converted.append(domain.value)
    return Ok(tuple(converted))


def store_result(
    repository: OcrRepository,
    result: OcrResult,
    thresholds: ConfidenceThresholds = ConfidenceThresholds(),
    reviewed: bool = False,
) -> Result:
    """Save a result and the Activity records it approves. Returns Ok(activities)."""
    saved = repository.save(result)
    if saved.is_err():
        return saved
    approved = approve_activities(result, thresholds, reviewed)
    if approved.is_err():
        return approved
    if approved.value:
        logger.info(f"Approved {len(approved.value)} activity(ies) from {result.id}")
    return repository.save_activities(result.id, approved.value)


def apply_review(
    result: OcrResult,
    command: ReviewOcrCommand,
    keywords: KeywordCatalog = DEFAULT_KEYWORDS,
) -> Result:
    """Replace parsed content with a reviewer's correction and keep approved activities."""
    validated = validate_review_command(command)
    if validated.is_err():
        return validated
    content = validate_parsed_content(command.corrected_content)
    if content.is_err():
        return content

    activities = convert_to_activities(command.corrected_content, keywords)
    if activities.is_err():
        return activities
    kept = activities.value
    if command.approved_activities:
        kept = tuple(a for a in kept if a.title in command.approved_activities)

    return validate_ocr_result(replace(
        result,
        parsed_content=command.corrected_content,
        extracted_activities=kept,
        processing_status="completed",
        updated_at=today(),
    ))


def read_ocr_file(file_path: Path, default_confidence: float) -> ProcessOcrCommand:
    """Read an OCR text dump. A first line "# confidence: 0.87" overrides the default."""
    text = file_path.read_text(encoding="utf-8", errors="replace")
    confidence = default_confidence
    first, _, rest = text.partition("\n")
    if match := _CONFIDENCE_HEADER.match(first.strip()):
        confidence = float(match.group(1))
        text = rest
    return ProcessOcrCommand(image_id=file_path.stem, raw_text=text, confidence=confidence)


def process_file(
    file_path: Path,
    config: dict[str, Any],
    keywords: KeywordCatalog | None = None,
) -> Result | None:
    """Process a single OCR text file.

    Returns:
        Result holding an OcrResult or an error, or None if the file type is unsupported.
    """
    if file_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        return None

    parsing = config.get("parsing", {})
    keywords = keywords or load_keywords(config.get("keywords_path"))
    command = read_ocr_file(file_path, float(parsing.get("default_confidence", 0.9)))
    return process_command(
        command,
        keywords=keywords,
        thresholds=get_thresholds(config),
        default_year=int(parsing.get("default_year", DEFAULT_YEAR)),
        result_id=f"{command.image_id}-{compute_hash(command.raw_text)[:8]}",
    )


def process_directory(ingest_path: Path, config: dict[str, Any]) -> list[tuple[Path, Result]]:
    """Process every supported file; one failing document never stops the batch."""
    outcomes: list[tuple[Path, Result]] = []
    if not ingest_path.exists():
        return outcomes

    keywords = load_keywords(config.get("keywords_path"))
    for file_path in sorted(ingest_path.rglob("*")):
        if not file_path.is_file() or file_path.name.startswith("."):
            continue
        try:
            outcome = process_file(file_path, config, keywords)
        except OSError as e:
            outcome = Err(ProcessingError(f"ファイルを処理できませんでした: {file_path.name}", details=str(e)))
        if outcome is None:
            continue
        if outcome.is_err():
            logger.warning(f"Failed to process {file_path.name}: {outcome.error.message}")
        outcomes.append((file_path, outcome))
    return outcomes
