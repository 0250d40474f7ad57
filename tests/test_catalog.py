"""Tests for resistances, the monster catalog and monster lookups."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from drakeema.catalog import ContentCatalog, Monster, Resistance, Resistances, resistance_sort_key
from drakeema.contents.monster_lookup import MonsterLookup
from drakeema.errors import InvalidScheduleConfig, UnknownContentId

JST = timezone(timedelta(hours=9))
AREAS = ["一獄", "二獄"]


def monster(identifier: str, category: str = "field", resistances=None, **extra) -> Monster:
    data = {
        "id": identifier,
        "category": category,
        "display": extra.get("display", identifier),
        "nickname_regex": extra.get("nickname_regex", identifier),
        "resistances": resistances,
    }
    if "official_name" in extra:
        data["official_name"] = extra["official_name"]
    return Monster.from_dict(data)


def test_resistance_order_is_canonical():
    labels = ["闇", "呪文", "不定", "即死"]
    assert sorted(labels, key=resistance_sort_key) == ["呪文", "即死", "闇", "不定"]
    assert list(Resistance)[0] is Resistance.SPELL


def test_resistances_from_flat_and_nested_lists():
    assert Resistances.from_data(["呪文", "闇"]).areas == (("呪文", "闇"),)
    assert len(Resistances.from_data([["即死"], ["炎"]])) == 2
    assert Resistances.from_data(None).is_empty()


def test_join_merges_and_sorts():
    left = Resistances.from_data(["闇", "即死"])
    right = Resistances.from_data(["呪文", "即死"])
    assert left.join(right).display() == "呪文、即死、闇"


def test_join_broadcasts_single_area():
    areas = Resistances.from_data([["炎"], ["氷"]])
    joined = Resistances.from_data(["即死"]).join(areas)
    assert joined.display(AREAS) == "一獄は 即死、炎、二獄は 即死、氷"


def test_join_rejects_mismatched_areas():
    two = Resistances.from_data([["炎"], ["氷"]])
    three = Resistances.from_data([["炎"], ["氷"], ["風"]])
    with pytest.raises(ValueError):
        two.join(three)


def test_multi_area_display_needs_names():
    with pytest.raises(ValueError):
        Resistances.from_data([["炎"], ["氷"]]).display(["一獄"])


def test_catalog_rejects_duplicates_and_unknown_ids():
    with pytest.raises(InvalidScheduleConfig):
        ContentCatalog([monster("a"), monster("a")])
    catalog = ContentCatalog([monster("a")])
    assert "a" in catalog
    with pytest.raises(UnknownContentId) as excinfo:
        catalog["missing"]
    assert "missing" in str(excinfo.value)
    # Lookups may be guarded either as configuration errors or as key errors.
    assert isinstance(excinfo.value, KeyError)


def test_catalog_loads_single_entries_and_lists(tmp_path):
    (tmp_path / "one.yaml").write_text(
        "id: slime\ncategory: field\ndisplay: スライム\nnickname_regex: スライム\n",
        encoding="utf-8",
    )
    (tmp_path / "many.yaml").write_text(
        "monsters:\n"
        "  - id: drake\n"
        "    category: field\n"
        "    display: ドラキー\n"
        "    nickname_regex: ドラキー\n"
        "    resistances: [闇]\n",
        encoding="utf-8",
    )
    catalog = ContentCatalog.load(tmp_path)
    assert len(catalog) == 2
    assert catalog["drake"].resistances.display() == "闇"
    assert catalog["slime"].official_name == "スライム"


def test_monster_requires_fields():
    with pytest.raises(InvalidScheduleConfig):
        Monster.from_dict({"id": "x", "category": "field"})
    with pytest.raises(InvalidScheduleConfig):
        Monster.from_dict(
            {"id": "x", "category": "field", "display": "x", "nickname_regex": "("}
        )


def build_lookup(catalog: ContentCatalog) -> MonsterLookup:
    return MonsterLookup.from_dict(
        {
            "information": "__NAME__ には __RESISTANCES__ の耐性があると良いようです！",
            "information_without_resistance": "__NAME__ に必要な耐性はないようです！",
            "area_names": {"palace": AREAS},
            "ignore_categories": ["defense"],
        },
        catalog,
    )


def test_lookup_describes_matching_monsters():
    catalog = ContentCatalog(
        [
            monster("darkking", resistances=["呪文", "即死"], official_name="常闇の聖戦 ダークキング",
                    nickname_regex="ダークキング|ダーク"),
            monster("slime", resistances=[], nickname_regex="スライム"),
            monster("armor", category="palace", resistances=[["炎"], ["氷"]], nickname_regex="鎧"),
            monster("defender", category="defense", resistances=["闇"], nickname_regex="ダーク"),
        ]
    )
    lookup = build_lookup(catalog)
    now = datetime(2020, 1, 1, tzinfo=JST)

    assert lookup.respond(now, "ダークキングおしえて") == (
        "常闇の聖戦 ダークキング には 呪文、即死 の耐性があると良いようです！"
    )
    assert lookup.respond(now, "スライム") == "slime に必要な耐性はないようです！"
    assert lookup.respond(now, "鎧") == "armor には 一獄は 炎、二獄は 氷 の耐性があると良いようです！"
    assert lookup.respond(now, "なにもない") is None


def test_lookup_requires_area_names_for_multi_area_monsters():
    catalog = ContentCatalog([monster("armor", category="castle", resistances=[["炎"], ["氷"]])])
    with pytest.raises(InvalidScheduleConfig):
        build_lookup(catalog)
