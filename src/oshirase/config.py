"""Configuration management for oshirase."""

import os
from pathlib import Path
from typing import Any

import yaml

from .keywords import DEFAULT_KEYWORDS, KeywordCatalog
from .models import ConfidenceThresholds
from .validation import make_thresholds


DEFAULT_CONFIG = {
    "inbox_path": "~/.oshirase/inbox",
    "results_path": "~/.oshirase/results",
    "storage_backend": "yaml",
    "keywords_path": None,
    "parsing": {"default_year": 2025, "default_confidence": 0.9},
    "thresholds": {"min_acceptable": 0.5, "review_required": 0.7, "auto_approve": 0.9},
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".oshirase" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = _copy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path, encoding="utf-8") as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if results_path := os.environ.get("OSHIRASE_RESULTS_PATH"):
        cfg["results_path"] = results_path

    # Expand paths
    for key in ("inbox_path", "results_path"):
        cfg[key] = str(Path(cfg[key]).expanduser().resolve())

    return cfg


def load_keywords(config_path: str | Path | None = None) -> KeywordCatalog:
    """Load the keyword catalog, overlaying a YAML file onto the defaults."""
    candidates = [
        Path.cwd() / "config" / "keywords.yaml",
        Path.home() / ".oshirase" / "keywords.yaml",
    ]
    if config_path:
        candidates.insert(0, Path(config_path).expanduser())

    for p in candidates:
        if p.exists():
            with open(p, encoding="utf-8") as f:
                return KeywordCatalog.from_dict(yaml.safe_load(f) or {})

    return DEFAULT_KEYWORDS


def get_thresholds(config: dict[str, Any]) -> ConfidenceThresholds:
    """Build review thresholds from config; raises ValueError when out of order."""
    raw = config.get("thresholds", {})
    result = make_thresholds(
        min_acceptable=float(raw.get("min_acceptable", 0.5)),
        review_required=float(raw.get("review_required", 0.7)),
        auto_approve=float(raw.get("auto_approve", 0.9)),
    )
    if result.is_err():
        raise ValueError(f"Invalid thresholds: {result.error.message}")
    return result.value


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy(v) for k, v in value.items()}
    return value


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
