"""Tests for the content parser."""

import pytest

from oshirase.keywords import DEFAULT_KEYWORDS, KeywordCatalog
from oshirase.parser import EMPTY_TEXT_MESSAGE, average_confidence, parse_ocr_text

FIELD_TRIP = "遠足のお知らせ\n日時：3月15日（金）午前9時30分〜午後3時\n場所：上野動物園\n持ち物：\n・水筒\n・帽子"


def test_parse_field_trip_notice():
    result = parse_ocr_text(FIELD_TRIP, 0.9)
    assert result.is_ok()
    content = result.value
    assert content.title == "遠足のお知らせ"
    assert [d.date for d in content.dates] == ["2025-03-15"]
    assert [t.time for t in content.times] == ["09:30", "15:00"]
    assert "上野動物園" in content.locations
    assert content.items[0].items == ("水筒", "帽子")
    assert content.confidence == pytest.approx(0.9)


def test_empty_text_is_a_parse_error():
    for text in ("", "   \n　"):
        result = parse_ocr_text(text, 0.5)
        assert result.is_err()
        assert result.error.kind == "ParseError"
        assert result.error.message == EMPTY_TEXT_MESSAGE


def test_unreadable_text_keeps_ocr_confidence():
    result = parse_ocr_text("？？？", 0.3)
    assert result.is_ok()
    assert result.value.dates == ()
    assert result.value.confidence == pytest.approx(0.3)


def test_confidence_averages_all_extractions():
    result = parse_ocr_text("運動会\n6/1 10時", 0.9)
    # slash date 0.8, bare hour 0.75, OCR 0.9
    assert result.value.confidence == pytest.approx((0.8 + 0.75 + 0.9) / 3)


def test_confidence_stays_in_bounds():
    for text in (FIELD_TRIP, "令和7年4月20日（土）午後2時より", "宿題\n提出：5月10日まで"):
        content = parse_ocr_text(text, 1.0).value
        assert 0 <= content.confidence <= 1
        for record in (*content.dates, *content.times, *content.items):
            assert 0 <= record.confidence <= 1


def test_era_date_with_time():
    content = parse_ocr_text("授業参観\n令和7年4月20日（土）午後2時より", 0.8).value
    assert [d.date for d in content.dates] == ["2025-04-20"]
    assert [t.time for t in content.times] == ["14:00"]


def test_unusual_spacing_and_fullwidth_input():
    text = "　運動会のお知らせ\n\n\n日時：　５月２０日（火）　９：００～１２：００\n※雨天延期"
    content = parse_ocr_text(text, 0.9).value
    assert content.title == "運動会のお知らせ"
    assert content.dates[0].date == "2025-05-20"
    assert [t.time for t in content.times] == ["09:00", "12:00"]
    assert content.notes == ("雨天延期",)


def test_custom_keywords_are_used():
    keywords = KeywordCatalog.from_dict({"locations": ["公民館"]}, DEFAULT_KEYWORDS)
    content = parse_ocr_text("バザー\n公民館にて", 0.9, keywords).value
    assert content.locations == ("公民館",)


def test_invalid_ocr_confidence_fails_validation():
    result = parse_ocr_text("お知らせ", 1.5)
    assert result.is_err()
    assert result.error.field == "content.confidence"


def test_average_confidence():
    assert average_confidence([]) == 0.0
    assert average_confidence([0.5, 1.0]) == 0.75
