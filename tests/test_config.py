"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from oshirase.config import DEFAULT_CONFIG, get_thresholds, load_config, load_keywords
from oshirase.keywords import DEFAULT_KEYWORDS, KeywordCatalog


def test_load_config_merges_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text(
            f"results_path: {tmpdir}/results\n"
            "parsing:\n  default_year: 2026\n"
            "thresholds:\n  auto_approve: 0.95\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg["parsing"]["default_year"] == 2026
        assert cfg["parsing"]["default_confidence"] == 0.9
        assert cfg["thresholds"]["auto_approve"] == 0.95
        assert cfg["thresholds"]["min_acceptable"] == 0.5
        assert cfg["results_path"] == str((Path(tmpdir) / "results").resolve())


def test_load_config_does_not_mutate_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("parsing:\n  default_year: 2030\n", encoding="utf-8")
        load_config(path)
    assert DEFAULT_CONFIG["parsing"]["default_year"] == 2025


def test_env_override(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("OSHIRASE_RESULTS_PATH", tmpdir)
        cfg = load_config(Path(tmpdir) / "missing.yaml")
        assert cfg["results_path"] == str(Path(tmpdir).resolve())


def test_load_keywords_overlay():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "keywords.yaml"
        path.write_text(
            "locations: [公民館, 体育館]\n"
            "item_categories:\n  food: [水筒]\n"
            "unknown_key: [ignored]\n",
            encoding="utf-8",
        )
        keywords = load_keywords(path)
        assert keywords.locations == ("公民館", "体育館")
        assert keywords.item_categories == {"food": ("水筒",)}
        assert keywords.item_headers == DEFAULT_KEYWORDS.item_headers


def test_load_keywords_default(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        monkeypatch.setenv("HOME", tmpdir)
        assert load_keywords(None) is DEFAULT_KEYWORDS


def test_keyword_catalog_from_dict_base():
    base = KeywordCatalog(subjects=("国語",))
    catalog = KeywordCatalog.from_dict({"homework_terms": ["課題"]}, base)
    assert catalog.subjects == ("国語",)
    assert catalog.homework_terms == ("課題",)


def test_get_thresholds():
    thresholds = get_thresholds(DEFAULT_CONFIG)
    assert thresholds.review_required == 0.7
    with pytest.raises(ValueError):
        get_thresholds({"thresholds": {"min_acceptable": 0.9, "review_required": 0.7}})
