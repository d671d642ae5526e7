"""Keyword catalog: the bounded vocabulary every extractor matches against."""

from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class KeywordCatalog:
    """Vocabularies for notice parsing. Pass a custom instance to swap them."""
    activities: tuple[str, ...] = ()
    belongings: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    # Line labels keyed by the time type they announce (start_time, end_time, deadline).
    time_markers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    # Priority words keyed by the priority they raise or lower the notice to (high, low).
    priorities: dict[str, tuple[str, ...]] = field(default_factory=dict)
    item_headers: tuple[str, ...] = ()
    note_headers: tuple[str, ...] = ()
    location_labels: tuple[str, ...] = ()
    # Categories checked after belongings, in order; the first with a matching noun wins.
    item_categories: dict[str, tuple[str, ...]] = field(default_factory=dict)
    meeting_terms: tuple[str, ...] = ()
    homework_terms: tuple[str, ...] = ()
    due_markers: tuple[str, ...] = ()
    range_markers: tuple[str, ...] = ()
    reference_markers: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()
    category_tags: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: "KeywordCatalog | None" = None) -> "KeywordCatalog":
        """Overlay a mapping (e.g. parsed YAML) onto ``base``. Unknown keys are ignored."""
        base = base or DEFAULT_KEYWORDS
        known = {f.name for f in fields(cls)}
        changes: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if isinstance(value, dict):
                changes[key] = {k: tuple(v) for k, v in value.items()}
            else:
                changes[key] = tuple(value)
        return replace(base, **changes)

    def item_category_terms(self) -> dict[str, tuple[str, ...]]:
        """Category vocabularies in matching order, belongings first."""
        return {"belongings": self.belongings, **self.item_categories}

    def all_item_terms(self) -> tuple[str, ...]:
        terms: list[str] = []
        for vocab in self.item_category_terms().values():
            terms.extend(vocab)
        return tuple(terms)


DEFAULT_KEYWORDS = KeywordCatalog(
    activities=(
        "遠足", "保護者会", "運動会", "授業参観", "修学旅行", "宿題", "課題",
        "発表会", "卒業式", "入学式", "終業式", "始業式", "面談", "懇談会",
        "体育祭", "文化祭", "学習発表会", "参観日", "合唱祭", "球技大会",
    ),
    belongings=(
        "水筒", "帽子", "タオル", "ハンカチ", "ティッシュ", "雨具", "傘",
        "レインコート", "着替え", "レジャーシート", "ビニール袋", "リュック",
        "名札", "連絡帳", "図書カード",
    ),
    locations=(
        "学校", "体育館", "運動場", "校庭", "図書館", "音楽室", "美術室",
        "理科室", "家庭科室", "会議室", "多目的室", "講堂", "保健室",
        "職員室", "教室", "廊下", "玄関", "正門", "裏門", "駐車場",
    ),
    time_markers={
        "start_time": ("開始", "集合", "受付"),
        "end_time": ("終了", "解散", "下校", "終わり"),
        "deadline": ("締切", "締め切り", "期限"),
    },
    priorities={
        "high": ("重要", "至急", "必須", "絶対"),
        "low": ("任意", "希望者", "可能であれば"),
    },
    item_headers=(
        "持ち物", "持参物", "持参するもの", "持ってくるもの", "準備物",
        "用意するもの", "内容",
    ),
    note_headers=("注意事項", "注意", "備考", "連絡事項", "お願い"),
    location_labels=("集合場所", "場所", "会場"),
    item_categories={
        "materials": (
            "教科書", "ノート", "筆記用具", "プリント", "辞書", "ワークブック",
            "練習帳", "ドリル", "赤ペン", "鉛筆", "消しゴム", "定規", "絵の具",
            "色鉛筆", "はさみ", "のり", "感想文",
        ),
        "clothing": ("体操服", "運動靴", "上履き", "制服", "水着", "赤白帽", "エプロン"),
        "food": ("弁当", "昼食", "おやつ", "飲み物", "お茶", "給食"),
        "documents": ("資料", "書類", "用紙", "申込書", "確認書", "同意書", "調査票", "集金袋"),
    },
    meeting_terms=("保護者会", "懇談会", "会議", "説明会", "役員会", "総会"),
    homework_terms=("宿題", "課題", "提出"),
    due_markers=("提出", "締切", "締め切り", "期限"),
    range_markers=("〜", "～", "~", "-", "から", "より", "まで"),
    reference_markers=("発行", "配布", "作成"),
    subjects=("国語", "算数", "数学", "理科", "社会", "英語", "音楽", "図工", "体育", "生活"),
    category_tags={
        "event": ("イベント", "学校行事"),
        "meeting": ("会議", "保護者"),
        "task": ("タスク",),
        "appointment": ("面談", "参観"),
        "deadline": ("締切", "期限"),
        "milestone": ("節目",),
        "reminder": ("リマインダー",),
    },
)
