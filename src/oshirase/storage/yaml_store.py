"""File-backed repository: one YAML document per OCR result."""

import logging
import re
import threading
from pathlib import Path

import yaml

from ..errors import Err, NotFoundError, Ok, ProcessingError, Result
from ..models import Activity, OcrQuery, OcrResult
from ..serialize import domain_activity_from_dict, ocr_result_from_dict, to_plain
from .base import OcrRepository, matches_query

logger = logging.getLogger(__name__)


class YamlOcrRepository(OcrRepository):
    """Stores results as ``<results_path>/<id>.yaml``.

    Approved activities live beside them in ``<results_path>/activities/<id>.yaml``
    as a list, one file per parent result.
    """

    def __init__(self, results_path: str):
        self.results_path = Path(results_path)
        self.activities_path = self.results_path / "activities"
        self._lock = threading.Lock()

    def _path(self, result_id: str) -> Path:
        return self.results_path / f"{self._sanitize_filename(result_id)}.yaml"

    def _activities_file(self, result_id: str) -> Path:
        return self.activities_path / f"{self._sanitize_filename(result_id)}.yaml"

    def save(self, result: OcrResult) -> Result:
        text = yaml.safe_dump(to_plain(result), allow_unicode=True, sort_keys=False)
        with self._lock:
            self.results_path.mkdir(parents=True, exist_ok=True)
            self._path(result.id).write_text(text, encoding="utf-8")
        return Ok(result)

    def _read(self, path: Path, expected: type) -> Result:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.warning(f"Unreadable file {path.name}: {e}")
            return Err(ProcessingError(f"ファイルを読み込めません: {path.name}", details=str(e)))
        if data is None:
            data = expected()
        if not isinstance(data, expected):
            logger.warning(f"Skipping {path.name}: expected a {expected.__name__}, got {type(data).__name__}")
            return Err(ProcessingError(
                f"ファイルの形式が正しくありません: {path.name}",
                details=f"expected {expected.__name__}, got {type(data).__name__}",
            ))
        return Ok(data)

    def _load(self, path: Path) -> Result:
        read = self._read(path, dict)
        if read.is_err():
            return read
        try:
            return Ok(ocr_result_from_dict(read.value))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Unreadable result file {path.name}: {e}")
            return Err(ProcessingError(f"結果ファイルを読み込めません: {path.name}", details=str(e)))

    def find_by_id(self, result_id: str) -> Result:
        path = self._path(result_id)
        if not path.exists():
            return Err(NotFoundError(f"OCR結果が見つかりません: {result_id}", result_id))
        return self._load(path)

    def find_many(self, query: OcrQuery | None = None) -> Result:
        query = query or OcrQuery()
        if not self.results_path.exists():
            return Ok(())

        results = []
        for path in sorted(self.results_path.glob("*.yaml")):
            loaded = self._load(path)
            if loaded.is_err():
                continue
            if matches_query(loaded.value, query):
                results.append(loaded.value)
        results.sort(key=lambda r: r.id)
        return Ok(tuple(results))

    def delete(self, result_id: str) -> Result:
        path = self._path(result_id)
        with self._lock:
            if not path.exists():
                return Err(NotFoundError(f"OCR結果が見つかりません: {result_id}", result_id))
            path.unlink()
            self._activities_file(result_id).unlink(missing_ok=True)
        return Ok(None)

    def save_activities(self, result_id: str, activities: tuple[Activity, ...]) -> Result:
        text = yaml.safe_dump([to_plain(a) for a in activities], allow_unicode=True, sort_keys=False)
        with self._lock:
            self.activities_path.mkdir(parents=True, exist_ok=True)
            self._activities_file(result_id).write_text(text, encoding="utf-8")
        return Ok(tuple(activities))

    def _load_activities(self, path: Path) -> Result:
        read = self._read(path, list)
        if read.is_err():
            return read
        try:
            return Ok(tuple(domain_activity_from_dict(a) for a in read.value))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Unreadable activity file {path.name}: {e}")
            return Err(ProcessingError(f"アクティビティファイルを読み込めません: {path.name}", details=str(e)))

    def find_activities(self, result_id: str | None = None) -> Result:
        if result_id is not None:
            path = self._activities_file(result_id)
            return self._load_activities(path) if path.exists() else Ok(())
        if not self.activities_path.exists():
            return Ok(())

        activities: list[Activity] = []
        for path in sorted(self.activities_path.glob("*.yaml")):
            loaded = self._load_activities(path)
            if loaded.is_err():
                continue
            activities.extend(loaded.value)
        return Ok(tuple(activities))

    @staticmethod
    def _sanitize_filename(name: str) -> str:
        """Sanitize a string for use as a filename."""
        name = re.sub(r'[<>:"/\\|?*]', '', name)
        name = name.strip(". ")
        return name[:100] if name else "untitled"
