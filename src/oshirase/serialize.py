"""Plain-data conversion for records written to YAML or JSON."""

from dataclasses import asdict, is_dataclass
from typing import Any

from .models import (
    Activity,
    ActivityChecklistItem,
    ChecklistItem,
    ExtractedActivity,
    ExtractedDate,
    ExtractedItem,
    ExtractedTime,
    OcrResult,
    ParsedContent,
)


def to_plain(value: Any) -> Any:
    """Dataclasses to dicts and tuples to lists, recursively."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def parsed_content_from_dict(data: dict[str, Any]) -> ParsedContent:
    return ParsedContent(
        title=data.get("title"),
        dates=tuple(ExtractedDate(**d) for d in data.get("dates", [])),
        times=tuple(ExtractedTime(**t) for t in data.get("times", [])),
        items=tuple(
            ExtractedItem(**{**i, "items": tuple(i.get("items", []))})
            for i in data.get("items", [])
        ),
        locations=tuple(data.get("locations", [])),
        notes=tuple(data.get("notes", [])),
        confidence=float(data.get("confidence", 0.0)),
    )


def activity_from_dict(data: dict[str, Any]) -> ExtractedActivity:
    return ExtractedActivity(**{
        **data,
        "checklist": tuple(ChecklistItem(**c) for c in data.get("checklist", [])),
        "tags": tuple(data.get("tags", [])),
    })


def ocr_result_from_dict(data: dict[str, Any]) -> OcrResult:
    return OcrResult(**{
        **data,
        "parsed_content": parsed_content_from_dict(data.get("parsed_content", {})),
        "extracted_activities": tuple(activity_from_dict(a) for a in data.get("extracted_activities", [])),
    })


def domain_activity_from_dict(data: dict[str, Any]) -> Activity:
    return Activity(**{
        **data,
        "member_ids": tuple(data.get("member_ids", [])),
        "checklist": tuple(
            ActivityChecklistItem(**{**c, "assigned_member_ids": tuple(c.get("assigned_member_ids", []))})
            for c in data.get("checklist", [])
        ),
        "tags": tuple(data.get("tags", [])),
    })
