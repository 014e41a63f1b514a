from __future__ import annotations

import pandas as pd

from ebl_profile.features.grouping import group_by_category, master_category_order


def _records() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "category": ["Stomach", "Colorectal", "Stomach", "Biliary", "Colorectal"],
            "value": [10.0, 20.0, 30.0, 40.0, 50.0],
        }
    )


def test_master_category_order_uses_first_occurrence() -> None:
    assert master_category_order(_records()) == ("Stomach", "Colorectal", "Biliary")
    assert master_category_order(_records().iloc[0:0]) == ()


def test_group_by_category_follows_master_order_and_keeps_empty_groups() -> None:
    records = _records()
    master = ("Biliary", "Vascular", "Stomach", "Colorectal")

    filtered = records[records["category"] != "Biliary"]
    groups = group_by_category(filtered, master)

    assert list(groups) == list(master)
    assert groups["Biliary"].empty
    assert groups["Vascular"].empty
    assert list(groups["Vascular"].columns) == ["category", "value"]
    assert groups["Stomach"]["value"].tolist() == [10.0, 30.0]
    assert groups["Colorectal"]["value"].tolist() == [20.0, 50.0]


def test_group_by_category_ignores_categories_outside_master_order() -> None:
    groups = group_by_category(_records(), ("Biliary",))

    assert list(groups) == ["Biliary"]
    assert groups["Biliary"]["value"].tolist() == [40.0]


def test_group_by_category_on_empty_records() -> None:
    empty = _records().iloc[0:0]

    groups = group_by_category(empty, ("Stomach", "Biliary"))

    assert list(groups) == ["Stomach", "Biliary"]
    assert all(frame.empty for frame in groups.values())
