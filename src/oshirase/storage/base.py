"""Abstract base class for OCR result repositories and factory function."""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import replace
from typing import Any

from ..errors import Ok, Result
from ..models import Activity, OcrQuery, OcrResult, OcrStatistics, today


def matches_query(result: OcrResult, query: OcrQuery) -> bool:
    if query.image_ids is not None and result.image_id not in query.image_ids:
        return False
    if query.status is not None and result.processing_status != query.status:
        return False
    if query.confidence_threshold is not None and result.confidence > query.confidence_threshold:
        return False
    if query.date_range is not None:
        start, end = query.date_range
        if not start <= result.created_at <= end:
            return False
    return True


class OcrRepository(ABC):
    """Common interface for OCR result storage backends."""

    @abstractmethod
    def save(self, result: OcrResult) -> Result:
        """Insert or replace a result by id. Returns Ok(result)."""

    @abstractmethod
    def find_by_id(self, result_id: str) -> Result:
        """Returns Ok(result) or Err(NotFoundError)."""

    @abstractmethod
    def find_many(self, query: OcrQuery | None = None) -> Result:
        """Returns Ok(tuple of results) matching the query, ordered by id."""

    @abstractmethod
    def delete(self, result_id: str) -> Result:
        """Remove a result and its approved activities. Returns Ok(None) or Err(NotFoundError)."""

    @abstractmethod
    def save_activities(self, result_id: str, activities: tuple[Activity, ...]) -> Result:
        """Replace the approved activities stored for a result. Returns Ok(activities)."""

    @abstractmethod
    def find_activities(self, result_id: str | None = None) -> Result:
        """Returns Ok(tuple of activities) for one result, or for all results when None."""

    def update(self, result_id: str, **changes: Any) -> Result:
        found = self.find_by_id(result_id)
        if found.is_err():
            return found
        changes.setdefault("updated_at", today())
        return self.save(replace(found.value, **changes))

    def find_pending(self) -> Result:
        return self.find_many(OcrQuery(status="pending"))

    def find_needing_review(self) -> Result:
        return self.find_many(OcrQuery(status="needs_review"))

    def find_low_confidence(self, threshold: float) -> Result:
        return self.find_many(OcrQuery(confidence_threshold=threshold))

    def find_by_date_range(self, start: str, end: str) -> Result:
        return self.find_many(OcrQuery(date_range=(start, end)))

    def get_statistics(self) -> Result:
        found = self.find_many()
        if found.is_err():
            return found
        results = found.value
        stats = OcrStatistics(total_results=len(results))
        if not results:
            return Ok(stats)

        statuses = Counter(r.processing_status for r in results)
        stats.pending_results = statuses["pending"]
        stats.completed_results = statuses["completed"]
        stats.failed_results = statuses["failed"]
        stats.review_required_results = statuses["needs_review"]
        stats.average_confidence = sum(r.confidence for r in results) / len(results)
        stats.processing_success_rate = stats.completed_results / len(results)
        categories = Counter(a.category for r in results for a in r.extracted_activities)
        stats.top_categories = categories.most_common(5)
        return Ok(stats)


def get_repository(config: dict[str, Any]) -> OcrRepository:
    """Factory: return the right repository based on config."""
    backend = config.get("storage_backend", "yaml")

    if backend == "yaml":
        from .yaml_store import YamlOcrRepository
        return YamlOcrRepository(config["results_path"])
    elif backend == "memory":
        from .memory import InMemoryOcrRepository
        return InMemoryOcrRepository()
    else:
        raise ValueError(f"Unknown storage_backend: {backend}")
