"""Tests for time extraction."""

from oshirase.extract import extract_times
from oshirase.keywords import KeywordCatalog


def test_meridiem_range():
    times = extract_times("午前9時30分〜午後3時")
    assert [t.time for t in times] == ["09:30", "15:00"]
    assert [t.type for t in times] == ["start_time", "end_time"]
    assert times[0].confidence == 0.9


def test_meridiem_edge_hours():
    assert extract_times("午前12時")[0].time == "00:00"
    assert extract_times("午後12時")[0].time == "12:00"
    assert extract_times("午後3時半")[0].time == "15:30"


def test_colon_times():
    times = extract_times("9:00〜12:00")
    assert [t.time for t in times] == ["09:00", "12:00"]
    assert times[1].type == "end_time"
    assert times[0].confidence == 0.95


def test_noon_and_bare_hour():
    noon = extract_times("正午に集合")
    assert noon[0].time == "12:00"
    assert noon[0].confidence == 0.85
    bare = extract_times("10時から")
    assert bare[0].time == "10:00"
    assert bare[0].confidence == 0.75


def test_deadline():
    times = extract_times("17:00まで")
    assert times[0].type == "deadline"


def test_fullwidth_colon():
    times = extract_times("１３：４５")
    assert times[0].time == "13:45"
    assert times[0].text == "１３：４５"


def test_out_of_range_and_durations_ignored():
    assert extract_times("25:00") == ()
    assert extract_times("24時間営業") == ()


def test_kanji_hour_words_ignored():
    assert extract_times("一時預かりのご案内") == ()
    assert extract_times("雨天の場合は一時中止します") == ()
    assert extract_times("十時から")[0].time == "10:00"
    assert extract_times("一時三十分")[0].time == "01:30"


def test_kanji_hours():
    assert extract_times("午後二時")[0].time == "14:00"


def test_labelled_start_and_end_lines():
    times = extract_times("開始：午前9時\n終了：午後3時")
    assert [t.time for t in times] == ["09:00", "15:00"]
    assert [t.type for t in times] == ["start_time", "end_time"]


def test_end_label_needs_an_earlier_time():
    times = extract_times("解散：午後2時")
    assert times[0].type == "start_time"


def test_deadline_label():
    times = extract_times("集合：8:30\n提出締切：17:00")
    assert [t.type for t in times] == ["start_time", "deadline"]


def test_custom_time_labels():
    keywords = KeywordCatalog.from_dict({"time_markers": {"end_time": ["おひらき"]}})
    times = extract_times("9:00 受付\nおひらき 12:00", keywords)
    assert times[1].type == "end_time"
