"""Convert validated activity candidates into persistence-ready Activity records."""

import threading
import time

from .errors import Ok, Result
from .models import OCR_PROVENANCE_TAG, Activity, ActivityChecklistItem, ExtractedActivity, today
from .validation import validate_extracted_activity

_id_lock = threading.Lock()
_last_millis = 0


def _next_millis() -> int:
    """Current epoch milliseconds, bumped so no two calls return the same value."""
    global _last_millis
    with _id_lock:
        now = time.time_ns() // 1_000_000
        _last_millis = max(now, _last_millis + 1)
        return _last_millis


def convert_to_activity_domain(activity: ExtractedActivity, parent_result_id: str) -> Result:
    """Build an Activity from ``activity``; validation is the only failure path."""
    validated = validate_extracted_activity(activity)
    if validated.is_err():
        return validated

    stamp = today()
    return Ok(Activity(
        id=f"ocr-{parent_result_id}-{_next_millis()}",
        title=activity.title,
        description=activity.description,
        start_date=activity.start_date,
        start_time=activity.start_time,
        end_date=activity.end_date,
        end_time=activity.end_time,
        due_date=activity.due_date,
        is_all_day=activity.is_all_day,
        category=activity.category,
        status="pending",
        priority=activity.priority,
        member_ids=(),
        location=activity.location,
        checklist=tuple(
            ActivityChecklistItem(id=item.id, title=item.title, checked=item.checked)
            for item in activity.checklist
        ),
        created_at=stamp,
        updated_at=stamp,
        tags=(*activity.tags, OCR_PROVENANCE_TAG),
    ))
