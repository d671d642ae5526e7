"""Tests for OCR result processing."""

import tempfile
from dataclasses import replace
from pathlib import Path

from oshirase.config import DEFAULT_CONFIG
from oshirase.models import ConfidenceThresholds, ProcessOcrCommand, ReviewOcrCommand
from oshirase.parser import parse_ocr_text
from oshirase.processor import (
    apply_review,
    approve_activities,
    compute_hash,
    process_command,
    process_directory,
    process_file,
    read_ocr_file,
    status_for,
    store_result,
)
from oshirase.storage import InMemoryOcrRepository

FIELD_TRIP = "遠足のお知らせ\n日時：3月15日（金）午前9時30分〜午後3時\n場所：上野動物園\n持ち物：\n・水筒\n・帽子"


def test_compute_hash():
    assert compute_hash("hello") == compute_hash("hello")
    assert compute_hash("hello") != compute_hash("world")


def test_status_for():
    thresholds = ConfidenceThresholds()
    assert status_for(0.3, thresholds) == "failed"
    assert status_for(0.6, thresholds) == "needs_review"
    assert status_for(0.7, thresholds) == "completed"


def test_process_command():
    result = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9))
    assert result.is_ok()
    ocr = result.value
    assert ocr.image_id == "img-1"
    assert ocr.processing_status == "completed"
    assert len(ocr.id) == 16
    assert len(ocr.extracted_activities) == 1
    assert ocr.parsed_content.title == "遠足のお知らせ"


def test_process_command_is_stable():
    first = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value
    second = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value
    assert first.id == second.id


def test_low_confidence_fails_review():
    ocr = process_command(ProcessOcrCommand("img-2", "？？？", 0.3)).value
    assert ocr.processing_status == "failed"


def test_invalid_command():
    result = process_command(ProcessOcrCommand("", FIELD_TRIP, 0.9))
    assert result.is_err()
    assert result.error.field == "command.image_id"


def test_approve_confident_result():
    ocr = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value
    ocr = replace(ocr, confidence=0.95)
    approved = approve_activities(ocr)
    assert approved.is_ok()
    assert len(approved.value) == 1
    assert approved.value[0].id.startswith(f"ocr-{ocr.id}-")
    assert "OCR生成" in approved.value[0].tags


def test_approve_skips_results_needing_review():
    ocr = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value
    ocr = replace(ocr, confidence=0.65, processing_status="needs_review")
    assert approve_activities(ocr).value == ()


def test_reviewed_result_skips_confidence_gate():
    ocr = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value
    ocr = replace(ocr, confidence=0.75)
    assert approve_activities(ocr).value == ()
    assert len(approve_activities(ocr, reviewed=True).value) == 1
    failed = replace(ocr, processing_status="failed")
    assert approve_activities(failed, reviewed=True).value == ()


def test_unordered_thresholds_are_rejected():
    thresholds = ConfidenceThresholds(0.9, 0.5, 0.1)
    result = process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9), thresholds=thresholds)
    assert result.is_err()
    assert result.error.kind == "ValidationError"
    assert result.error.field == "thresholds"

    ocr = replace(process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value, confidence=0.95)
    assert approve_activities(ocr, thresholds).error.field == "thresholds"


def test_store_result_saves_approved_activities():
    repository = InMemoryOcrRepository()
    ocr = replace(process_command(ProcessOcrCommand("img-1", FIELD_TRIP, 0.9)).value, confidence=0.95)
    stored = store_result(repository, ocr)
    assert stored.is_ok()
    assert repository.find_by_id(ocr.id).value == ocr
    assert repository.find_activities(ocr.id).value == stored.value
    assert stored.value[0].id.startswith(f"ocr-{ocr.id}-")


def test_apply_review():
    ocr = process_command(ProcessOcrCommand("img-2", "？？？", 0.3)).value
    corrected = parse_ocr_text(FIELD_TRIP, 1.0).value
    command = ReviewOcrCommand(ocr.id, corrected, approved_activities=("遠足のお知らせ",))
    reviewed = apply_review(ocr, command)
    assert reviewed.is_ok()
    assert reviewed.value.processing_status == "completed"
    assert reviewed.value.parsed_content == corrected
    assert [a.title for a in reviewed.value.extracted_activities] == ["遠足のお知らせ"]
    assert ocr.processing_status == "failed"


def test_apply_review_filters_unapproved():
    ocr = process_command(ProcessOcrCommand("img-2", "？？？", 0.3)).value
    corrected = parse_ocr_text(FIELD_TRIP, 1.0).value
    reviewed = apply_review(ocr, ReviewOcrCommand(ocr.id, corrected, approved_activities=("別の行事",)))
    assert reviewed.value.extracted_activities == ()


def test_apply_review_rejects_blank_id():
    ocr = process_command(ProcessOcrCommand("img-2", "？？？", 0.3)).value
    result = apply_review(ocr, ReviewOcrCommand("", ocr.parsed_content))
    assert result.error.field == "review.id"


def test_read_ocr_file_confidence_header():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "notice.txt"
        path.write_text("# confidence: 0.42\n遠足のお知らせ\n", encoding="utf-8")
        command = read_ocr_file(path, 0.9)
        assert command.image_id == "notice"
        assert command.confidence == 0.42
        assert command.raw_text == "遠足のお知らせ\n"


def test_process_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "trip.txt"
        path.write_text(FIELD_TRIP, encoding="utf-8")
        result = process_file(path, DEFAULT_CONFIG)
        assert result is not None
        assert result.is_ok()
        assert result.value.id.startswith("trip-")
        assert result.value.image_id == "trip"


def test_process_file_unsupported():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "photo.jpg"
        path.write_bytes(b"\xff\xd8")
        assert process_file(path, DEFAULT_CONFIG) is None


def test_process_directory_isolates_failures():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "a_trip.txt").write_text(FIELD_TRIP, encoding="utf-8")
        (root / "b_empty.txt").write_text("", encoding="utf-8")
        (root / ".hidden.txt").write_text(FIELD_TRIP, encoding="utf-8")
        (root / "c_image.png").write_bytes(b"\x89PNG")

        outcomes = process_directory(root, DEFAULT_CONFIG)
        assert [p.name for p, _ in outcomes] == ["a_trip.txt", "b_empty.txt"]
        assert outcomes[0][1].is_ok()
        assert outcomes[1][1].is_err()
        assert outcomes[1][1].error.field == "command.raw_text"


def test_process_missing_directory():
    assert process_directory(Path("/nonexistent/oshirase/inbox"), DEFAULT_CONFIG) == []
