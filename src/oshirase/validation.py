"""Validation rules for every record the pipeline constructs.

Each validator returns ``Ok(value)`` or ``Err(ValidationError)`` naming the
offending field. Composite validators stop at the first failure.
"""

import re

from .errors import Err, Ok, Result, ValidationError
from .models import (
    ACTIVITY_CATEGORIES,
    ACTIVITY_PRIORITIES,
    PROCESSING_STATUSES,
    ConfidenceThresholds,
    ExtractedActivity,
    ExtractedDate,
    ExtractedItem,
    ExtractedTime,
    OcrResult,
    ParsedContent,
    ProcessOcrCommand,
    ReviewOcrCommand,
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$", re.ASCII)

CONFIDENCE_MESSAGE = "信頼度は0から1の間で入力してください"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _confidence_error(value: float, field: str) -> Err | None:
    if not 0 <= value <= 1:
        return Err(ValidationError(CONFIDENCE_MESSAGE, field))
    return None


def validate_process_command(command: ProcessOcrCommand) -> Result:
    if _blank(command.image_id):
        return Err(ValidationError("画像IDが必要です", "command.image_id"))
    if _blank(command.raw_text):
        return Err(ValidationError("テキストが必要です", "command.raw_text"))
    if error := _confidence_error(command.confidence, "command.confidence"):
        return error
    return Ok(command)


def validate_review_command(command: ReviewOcrCommand) -> Result:
    if _blank(command.id):
        return Err(ValidationError("OCR結果IDが必要です", "review.id"))
    for index, title in enumerate(command.approved_activities):
        if _blank(title):
            return Err(ValidationError("承認するアクティビティ名が必要です", f"review.approved_activities.{index}"))
    return Ok(command)


def validate_ocr_result(result: OcrResult) -> Result:
    if _blank(result.image_id):
        return Err(ValidationError("画像IDが必要です", "result.image_id"))
    if _blank(result.raw_text):
        return Err(ValidationError("テキストが必要です", "result.raw_text"))
    if error := _confidence_error(result.confidence, "result.confidence"):
        return error
    if result.processing_status not in PROCESSING_STATUSES:
        return Err(ValidationError(f"不明な処理状態です: {result.processing_status}", "result.processing_status"))
    return Ok(result)


def validate_extracted_date(date: ExtractedDate) -> Result:
    if _blank(date.text):
        return Err(ValidationError("日付テキストが必要です", "date.text"))
    if error := _confidence_error(date.confidence, "date.confidence"):
        return error
    if not DATE_PATTERN.match(date.date):
        return Err(ValidationError("日付はYYYY-MM-DD形式で入力してください", "date.date"))
    return Ok(date)


def validate_extracted_time(time: ExtractedTime) -> Result:
    if _blank(time.text):
        return Err(ValidationError("時間テキストが必要です", "time.text"))
    if error := _confidence_error(time.confidence, "time.confidence"):
        return error
    if not TIME_PATTERN.match(time.time):
        return Err(ValidationError("時間はHH:MM形式で入力してください", "time.time"))
    return Ok(time)


def validate_extracted_item(item: ExtractedItem) -> Result:
    if _blank(item.text):
        return Err(ValidationError("アイテムテキストが必要です", "item.text"))
    if error := _confidence_error(item.confidence, "item.confidence"):
        return error
    if not item.items:
        return Err(ValidationError("少なくとも1つのアイテムが必要です", "item.items"))
    return Ok(item)


def validate_parsed_content(content: ParsedContent) -> Result:
    if error := _confidence_error(content.confidence, "content.confidence"):
        return error
    for date in content.dates:
        if (result := validate_extracted_date(date)).is_err():
            return result
    for time in content.times:
        if (result := validate_extracted_time(time)).is_err():
            return result
    for item in content.items:
        if (result := validate_extracted_item(item)).is_err():
            return result
    return Ok(content)


def validate_extracted_activity(activity: ExtractedActivity) -> Result:
    """Validate an activity candidate.

    Time order is only checked when start and end fall on the same date (or
    no dates are given): a multi-day span may start at a later clock time
    than it ends, e.g. an overnight trip from 15:00 to 09:30 the next day.
    """
    if _blank(activity.title):
        return Err(ValidationError("アクティビティタイトルが必要です", "activity.title"))
    if error := _confidence_error(activity.confidence, "activity.confidence"):
        return error
    if activity.category not in ACTIVITY_CATEGORIES:
        return Err(ValidationError(f"不明なカテゴリです: {activity.category}", "activity.category"))
    if activity.priority not in ACTIVITY_PRIORITIES:
        return Err(ValidationError(f"不明な優先度です: {activity.priority}", "activity.priority"))

    for name in ("start_date", "end_date", "due_date"):
        value = getattr(activity, name)
        if value is not None and not DATE_PATTERN.match(value):
            return Err(ValidationError("日付はYYYY-MM-DD形式で入力してください", f"activity.{name}"))
    for name in ("start_time", "end_time"):
        value = getattr(activity, name)
        if value is not None and not TIME_PATTERN.match(value):
            return Err(ValidationError("時間はHH:MM形式で入力してください", f"activity.{name}"))
    for index, entry in enumerate(activity.checklist):
        if _blank(entry.title):
            return Err(ValidationError("チェックリスト項目名が必要です", f"activity.checklist.{index}.title"))

    if activity.start_date and activity.end_date and activity.start_date > activity.end_date:
        return Err(ValidationError("開始日は終了日より前でなければなりません", "activity.dates"))

    if activity.start_time and activity.end_time and activity.start_date == activity.end_date:
        if activity.start_time >= activity.end_time:
            return Err(ValidationError("開始時間は終了時間より前でなければなりません", "activity.times"))

    return Ok(activity)


def validate_confidence_thresholds(thresholds: ConfidenceThresholds) -> Result:
    for name in ("min_acceptable", "review_required", "auto_approve"):
        if error := _confidence_error(getattr(thresholds, name), f"thresholds.{name}"):
            return error
    if not thresholds.min_acceptable < thresholds.review_required < thresholds.auto_approve:
        return Err(ValidationError(
            "閾値は min_acceptable < review_required < auto_approve の順でなければなりません",
            "thresholds",
        ))
    return Ok(thresholds)


def make_thresholds(
    min_acceptable: float = 0.5,
    review_required: float = 0.7,
    auto_approve: float = 0.9,
) -> Result:
    """Build ConfidenceThresholds, rejecting out-of-range or unordered values."""
    return validate_confidence_thresholds(ConfidenceThresholds(min_acceptable, review_required, auto_approve))
