"""In-process repository, mainly for tests and one-shot CLI runs."""

import threading

from ..errors import Err, NotFoundError, Ok, Result
from ..models import Activity, OcrQuery, OcrResult
from .base import OcrRepository, matches_query


class InMemoryOcrRepository(OcrRepository):
    """Dict-backed store. Saves are serialized; the last writer wins."""

    def __init__(self):
        self._results: dict[str, OcrResult] = {}
        self._activities: dict[str, tuple[Activity, ...]] = {}
        self._lock = threading.Lock()

    def save(self, result: OcrResult) -> Result:
        with self._lock:
            self._results[result.id] = result
        return Ok(result)

    def find_by_id(self, result_id: str) -> Result:
        with self._lock:
            result = self._results.get(result_id)
        if result is None:
            return Err(NotFoundError(f"OCR結果が見つかりません: {result_id}", result_id))
        return Ok(result)

    def find_many(self, query: OcrQuery | None = None) -> Result:
        query = query or OcrQuery()
        with self._lock:
            results = sorted(self._results.values(), key=lambda r: r.id)
        return Ok(tuple(r for r in results if matches_query(r, query)))

    def delete(self, result_id: str) -> Result:
        with self._lock:
            if self._results.pop(result_id, None) is None:
                return Err(NotFoundError(f"OCR結果が見つかりません: {result_id}", result_id))
            self._activities.pop(result_id, None)
        return Ok(None)

    def save_activities(self, result_id: str, activities: tuple[Activity, ...]) -> Result:
        with self._lock:
            self._activities[result_id] = tuple(activities)
        return Ok(tuple(activities))

    def find_activities(self, result_id: str | None = None) -> Result:
        with self._lock:
            if result_id is not None:
                return Ok(self._activities.get(result_id, ()))
            return Ok(tuple(a for key in sorted(self._activities) for a in self._activities[key]))
