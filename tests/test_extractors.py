"""Tests for item, location, note and title extraction."""

from oshirase.extract import extract_items, extract_locations, extract_notes, extract_title
from oshirase.extract.items import categorize_items, section_confidence
from oshirase.extract.text import split_header, to_int
from oshirase.keywords import KeywordCatalog


def test_bullet_list_section():
    items = extract_items("持ち物：\n・水筒\n・帽子\n\n場所：体育館")
    assert len(items) == 1
    assert items[0].items == ("水筒", "帽子")
    assert items[0].category == "belongings"
    assert items[0].confidence == 0.9


def test_inline_list_section():
    items = extract_items("持ち物：水筒、帽子、お弁当")
    assert items[0].items == ("水筒", "帽子", "お弁当")
    assert items[0].text == "水筒、帽子、お弁当"


def test_numbered_bullets():
    items = extract_items("【持参物】\n1. 教科書\n2. ノート")
    assert items[0].items == ("教科書", "ノート")
    assert items[0].category == "materials"


def test_unknown_items():
    items = extract_items("持ち物：\n・ぬいぐるみ")
    assert items[0].category == "other"
    assert items[0].confidence == 0.6


def test_belongings_vocabulary_overlay():
    keywords = KeywordCatalog.from_dict({"belongings": ["ぬいぐるみ"]})
    items = extract_items("持ち物：\n・ぬいぐるみ", keywords)
    assert items[0].category == "belongings"
    assert items[0].confidence == 0.9
    assert categorize_items(["水筒"], keywords) == "other"


def test_header_without_items_is_skipped():
    assert extract_items("持ち物：\n当日お知らせします") == ()


def test_categorize_and_confidence_helpers():
    assert categorize_items(["体操服"]) == "clothing"
    assert categorize_items(["申込書"]) == "documents"
    assert section_confidence(["水筒", "ぬいぐるみ"]) == 0.75
    assert section_confidence([]) == 0.0


def test_labelled_location():
    assert extract_locations("場所：上野動物園") == ("上野動物園",)


def test_label_value_hides_inner_vocabulary():
    assert extract_locations("集合場所：正門前") == ("正門前",)


def test_vocabulary_locations_in_order():
    text = "雨天時は体育館で行います。\n集合は校庭です。"
    assert extract_locations(text) == ("体育館", "校庭")


def test_notes_from_marks_and_headers():
    text = "遠足\n※雨天の場合は中止します\n注意事項：\n・名札をつけてください\n・遅れないこと\n以上"
    assert extract_notes(text) == ("雨天の場合は中止します", "名札をつけてください", "遅れないこと")


def test_inline_note_header():
    assert extract_notes("備考：上履きを忘れずに") == ("上履きを忘れずに",)


def test_title_is_first_non_blank_line():
    assert extract_title("\n　運動会のお知らせ　\n日時") == "運動会のお知らせ"
    assert extract_title("\n \n") is None


def test_split_header():
    assert split_header("◆持ち物：水筒", ("持ち物",)) == ("持ち物", "水筒")
    assert split_header("持ち物", ("持ち物",)) == ("持ち物", "")
    assert split_header("持ち物は不要です", ("持ち物",)) is None


def test_to_int():
    assert to_int("十二") == 12
    assert to_int("二十五") == 25
    assert to_int("十") == 10
    assert to_int("7") == 7
    assert to_int("あ") is None
