"""Data models used throughout oshirase.

All records are frozen: a revision produces a new value via
``dataclasses.replace``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

DateType = Literal["start_date", "end_date", "due_date", "reference"]
TimeType = Literal["start_time", "end_time", "deadline", "reference"]
ItemCategory = Literal["belongings", "materials", "clothing", "food", "documents", "other"]
ActivityCategory = Literal["event", "task", "appointment", "deadline", "meeting", "milestone", "reminder"]
ActivityPriority = Literal["low", "medium", "high"]
ActivityStatus = Literal["pending", "in_progress", "completed", "cancelled", "postponed"]
ProcessingStatus = Literal["pending", "processing", "completed", "failed", "needs_review"]

ACTIVITY_CATEGORIES = ("event", "task", "appointment", "deadline", "meeting", "milestone", "reminder")
ACTIVITY_PRIORITIES = ("low", "medium", "high")
PROCESSING_STATUSES = ("pending", "processing", "completed", "failed", "needs_review")

OCR_PROVENANCE_TAG = "OCR生成"


def today() -> str:
    return datetime.now().isoformat()[:10]


@dataclass(frozen=True)
class ExtractedDate:
    """A date found in OCR text, normalized to YYYY-MM-DD."""
    text: str  # original substring, e.g. "3月15日（金）"
    date: str
    confidence: float
    type: DateType = "start_date"


@dataclass(frozen=True)
class ExtractedTime:
    """A time found in OCR text, normalized to 24-hour HH:MM."""
    text: str  # original substring, e.g. "午前9時30分"
    time: str
    confidence: float
    type: TimeType = "start_time"


@dataclass(frozen=True)
class ExtractedItem:
    """One list section (e.g. 持ち物) split into its nouns."""
    text: str
    items: tuple[str, ...]
    confidence: float
    category: ItemCategory = "other"


@dataclass(frozen=True)
class ParsedContent:
    """Structured extraction of one raw OCR text."""
    title: str | None = None
    dates: tuple[ExtractedDate, ...] = ()
    times: tuple[ExtractedTime, ...] = ()
    items: tuple[ExtractedItem, ...] = ()
    locations: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    confidence: float = 0.0


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    title: str
    checked: bool = False
    category: ItemCategory | None = None


@dataclass(frozen=True)
class ExtractedActivity:
    """Candidate activity synthesized from parsed content, before persistence."""
    title: str
    category: ActivityCategory
    priority: ActivityPriority
    confidence: float
    is_all_day: bool = False
    description: str | None = None
    start_date: str | None = None
    start_time: str | None = None
    end_date: str | None = None
    end_time: str | None = None
    due_date: str | None = None
    location: str | None = None
    checklist: tuple[ChecklistItem, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActivityChecklistItem:
    id: str
    title: str
    checked: bool = False
    assigned_member_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Activity:
    """Persistence-ready activity produced by the domain converter."""
    id: str
    title: str
    category: ActivityCategory
    priority: ActivityPriority
    is_all_day: bool
    created_at: str
    updated_at: str
    status: ActivityStatus = "pending"
    description: str | None = None
    start_date: str | None = None
    start_time: str | None = None
    end_date: str | None = None
    end_time: str | None = None
    due_date: str | None = None
    location: str | None = None
    member_ids: tuple[str, ...] = ()
    checklist: tuple[ActivityChecklistItem, ...] = ()
    tags: tuple[str, ...] = ()
    completed_at: str | None = None


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Review workflow levels; build through ``make_thresholds`` to check the order."""
    min_acceptable: float = 0.5
    review_required: float = 0.7
    auto_approve: float = 0.9


@dataclass(frozen=True)
class ProcessOcrCommand:
    image_id: str
    raw_text: str
    confidence: float


@dataclass(frozen=True)
class ReviewOcrCommand:
    id: str
    corrected_content: ParsedContent
    approved_activities: tuple[str, ...] = ()  # titles of activities to keep


@dataclass(frozen=True)
class OcrResult:
    """Record handed to the repository for one processed image."""
    id: str
    image_id: str
    raw_text: str
    confidence: float
    parsed_content: ParsedContent
    extracted_activities: tuple[ExtractedActivity, ...] = ()
    processing_status: ProcessingStatus = "pending"
    created_at: str = field(default_factory=today)
    updated_at: str = field(default_factory=today)


@dataclass(frozen=True)
class OcrQuery:
    image_ids: tuple[str, ...] | None = None
    status: ProcessingStatus | None = None
    confidence_threshold: float | None = None  # match results at or below
    date_range: tuple[str, str] | None = None  # inclusive created_at range


@dataclass
class OcrStatistics:
    total_results: int = 0
    pending_results: int = 0
    completed_results: int = 0
    failed_results: int = 0
    review_required_results: int = 0
    average_confidence: float = 0.0
    processing_success_rate: float = 0.0
    top_categories: list[tuple[str, int]] = field(default_factory=list)
