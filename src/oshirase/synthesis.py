"""Turn ParsedContent into ExtractedActivity candidates."""

import logging

from .errors import ConversionError, Err, Ok, Result
from .keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .models import (
    ActivityCategory,
    ActivityPriority,
    ChecklistItem,
    ExtractedActivity,
    ExtractedItem,
    ParsedContent,
)
from .validation import validate_extracted_activity

logger = logging.getLogger(__name__)

MISSING_TITLE_MESSAGE = "タイトルが見つからないため、アクティビティを生成できません"
HOMEWORK_TITLE = "宿題"
HOMEWORK_CONFIDENCE_FACTOR = 0.8


def _first(values, kind: str, attr: str) -> str | None:
    for value in values:
        if value.type == kind:
            return getattr(value, attr)
    return None


def _dedupe(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def build_checklist(items: tuple[ExtractedItem, ...]) -> tuple[ChecklistItem, ...]:
    """One unchecked entry per noun, carrying the group's category."""
    return tuple(
        ChecklistItem(id=f"item-{group}-{index}", title=noun, checked=False, category=item.category)
        for group, item in enumerate(items)
        for index, noun in enumerate(item.items)
    )


def determine_priority(text: str, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> ActivityPriority:
    if any(term in text for term in keywords.priorities.get("high", ())):
        return "high"
    if any(term in text for term in keywords.priorities.get("low", ())):
        return "low"
    return "medium"


def categorize_activity(content: ParsedContent, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> ActivityCategory:
    """meeting vocabulary, then a due date without a time range, else event."""
    title = content.title or ""
    if any(term in title for term in keywords.meeting_terms):
        return "meeting"
    has_due = any(d.type == "due_date" for d in content.dates)
    has_range = (
        _first(content.times, "start_time", "time") is not None
        and _first(content.times, "end_time", "time") is not None
    )
    if has_due and not has_range:
        return "task"
    return "event"


def generate_tags(title: str, category: ActivityCategory, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> tuple[str, ...]:
    tags = list(keywords.category_tags.get(category, ()))
    tags.extend(keyword for keyword in keywords.activities if keyword in title)
    return _dedupe(tags)


def create_main_activity(content: ParsedContent, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> ExtractedActivity:
    title = content.title or ""
    category = categorize_activity(content, keywords)
    start_time = _first(content.times, "start_time", "time")
    end_time = _first(content.times, "end_time", "time")
    priority = determine_priority(title + "\n" + "\n".join(content.notes), keywords)
    if category == "meeting" and priority == "low":
        priority = "medium"
    return ExtractedActivity(
        title=title,
        description="\n".join(content.notes) or None,
        start_date=_first(content.dates, "start_date", "date"),
        start_time=start_time,
        end_date=_first(content.dates, "end_date", "date"),
        end_time=end_time,
        due_date=_first(content.dates, "due_date", "date"),
        is_all_day=start_time is None and end_time is None,
        category=category,
        priority=priority,
        location=content.locations[0] if content.locations else None,
        checklist=build_checklist(content.items),
        tags=generate_tags(title, category, keywords),
        confidence=content.confidence,
    )


def create_homework_activity(
    content: ParsedContent,
    keywords: KeywordCatalog = DEFAULT_KEYWORDS,
) -> ExtractedActivity | None:
    """Split a homework task out of the notice when it has cues and a due date."""
    cue_text = "\n".join([content.title or "", *content.notes])
    if not any(term in cue_text for term in keywords.homework_terms):
        return None
    due_date = _first(content.dates, "due_date", "date")
    if due_date is None:
        return None

    nouns = [noun for item in content.items for noun in item.items]
    subject_text = "\n".join([cue_text, *nouns])
    subjects = [subject for subject in keywords.subjects if subject in subject_text]
    return ExtractedActivity(
        title=HOMEWORK_TITLE,
        description="\n".join(content.notes) or None,
        due_date=due_date,
        is_all_day=True,
        category="task",
        priority="high",
        checklist=build_checklist(content.items),
        tags=_dedupe([HOMEWORK_TITLE, "学習", *subjects]),
        confidence=content.confidence * HOMEWORK_CONFIDENCE_FACTOR,
    )


def convert_to_activities(content: ParsedContent, keywords: KeywordCatalog = DEFAULT_KEYWORDS) -> Result:
    """Synthesize the main activity plus any split-out homework activity.

    Every candidate is validated; the first invalid one fails the whole call.
    """
    if not content.title:
        return Err(ConversionError(MISSING_TITLE_MESSAGE, "missing_title"))

    candidates = [create_main_activity(content, keywords)]
    homework = create_homework_activity(content, keywords)
    if homework is not None:
        candidates.append(homework)

    activities = []
    for candidate in candidates:
        validated = validate_extracted_activity(candidate)
        if validated.is_err():
            return validated
        activities.append(validated.value)

    logger.debug(f"Synthesized {len(activities)} activity(ies) from '{content.title}'")
    return Ok(tuple(activities))
