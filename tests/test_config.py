from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from ebl_profile.config import AppConfig, load_config


def test_default_config_file_matches_builtin_defaults() -> None:
    cfg_path = Path(__file__).resolve().parents[1] / "configs/default.yaml"
    cfg = load_config(cfg_path)

    builtin = AppConfig()
    assert cfg.columns == builtin.columns
    assert cfg.trim.percentile == 0.95
    assert cfg.density.bandwidth == 40.0
    assert cfg.density.grid_size == 50
    assert cfg.groups.min_group_size == 2
    assert [bucket.label for bucket in cfg.filters.age_buckets] == [
        bucket.label for bucket in builtin.filters.age_buckets
    ]
    assert [run.name for run in cfg.runs] == ["all", "male", "female", "female_60_79"]


def test_load_config_applies_overrides(tmp_path: Path) -> None:
    config_data = {
        "columns": {
            "category": "procedure",
            "value": "ebl_ml",
            "secondary_numeric": None,
            "secondary_category": "gender",
        },
        "normalization": {
            "category_exclusion_label": "Other",
            "secondary_category_labels": {" m ": "Man", "w": "Woman"},
        },
        "density": {"bandwidth": 25, "grid_size": 30},
        "groups": {"min_group_size": 5},
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config_data), encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.columns.category == "procedure"
    assert cfg.columns.secondary_numeric is None
    assert cfg.normalization.category_exclusion_label == "Other"
    assert cfg.normalization.secondary_category_labels == {"M": "Man", "W": "Woman"}
    assert cfg.density.bandwidth == 25.0
    assert cfg.density.grid_size == 30
    assert cfg.groups.min_group_size == 5
    assert cfg.trim.percentile == 0.95


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_config(config_path) == AppConfig()


@pytest.mark.parametrize(
    "overrides",
    [
        {"density": {"bandwidth": 0}},
        {"density": {"bandwidth": -3.5}},
        {"density": {"grid_size": 1}},
        {"trim": {"percentile": 1.5}},
        {"trim": {"percentile": -0.1}},
        {"groups": {"min_group_size": 0}},
        {"columns": {"category": "optype", "value": "optype"}},
        {"columns": {"category": "  "}},
        {"filters": {"age_buckets": [{"label": "a", "lower": 10, "upper": 5}]}},
        {
            "filters": {
                "age_buckets": [
                    {"label": "a", "lower": 0, "upper": 5},
                    {"label": "a", "lower": 5},
                ]
            }
        },
        {"filters": {"age_buckets": [{"label": "All", "lower": 0}]}},
        {"runs": [{"name": "x"}, {"name": "x"}]},
        {"unexpected_section": {}},
        {"density": {"bandwith": 10}},
        {"trim": {"percentil": 0.9}},
        {"columns": {"categroy": "optype"}},
        {"filters": {"age_buckets": [{"label": "a", "lower": 0, "uper": 5}]}},
        {"runs": [{"name": "x", "sex": "Male"}]},
    ],
)
def test_invalid_configuration_is_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate(overrides)


def test_config_sections_are_frozen() -> None:
    cfg = AppConfig()

    with pytest.raises(ValidationError):
        cfg.density.bandwidth = -5.0
    with pytest.raises(ValidationError):
        cfg.trim = cfg.trim
