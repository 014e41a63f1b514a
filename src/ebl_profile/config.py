from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ALL_CATEGORIES = "All"
ALL_BUCKETS = "All"


class ConfigError(ValueError):
    """Raised when a configuration cannot be applied to the input table."""


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ColumnsConfig(StrictModel):
    category: str = "optype"
    value: str = "intraop_ebl"
    secondary_numeric: str | None = "age"
    secondary_category: str | None = "sex"

    @field_validator("category", "value")
    @classmethod
    def _require_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("column name must be non-empty")
        return value

    @model_validator(mode="after")
    def _distinct_columns(self) -> ColumnsConfig:
        names = [
            name
            for name in (
                self.category,
                self.value,
                self.secondary_numeric,
                self.secondary_category,
            )
            if name
        ]
        if len(names) != len(set(names)):
            raise ValueError("configured columns must be distinct")
        return self


class NormalizationConfig(StrictModel):
    category_exclusion_label: str = "Others"
    secondary_category_labels: dict[str, str] = Field(
        default_factory=lambda: {"M": "Male", "F": "Female"}
    )

    @field_validator("secondary_category_labels")
    @classmethod
    def _uppercase_tokens(cls, value: dict[str, str]) -> dict[str, str]:
        return {token.strip().upper(): label for token, label in value.items()}


class TrimConfig(StrictModel):
    percentile: float = Field(default=0.95, ge=0.0, le=1.0)
    lower_bound: float = Field(default=1.0, gt=0.0)


class DensityConfig(StrictModel):
    bandwidth: float = Field(default=40.0, gt=0.0)
    grid_size: int = Field(default=50, ge=2)


class GroupsConfig(StrictModel):
    min_group_size: int = Field(default=2, ge=1)
    unknown_label: str = "Unknown"


class AgeBucketConfig(StrictModel):
    label: str
    lower: float
    upper: float | None = None

    @model_validator(mode="after")
    def _check_range(self) -> AgeBucketConfig:
        if self.upper is not None and self.upper <= self.lower:
            raise ValueError(f"age bucket {self.label!r} has upper <= lower")
        return self


def _default_age_buckets() -> list[AgeBucketConfig]:
    return [
        AgeBucketConfig(label="0-19", lower=0, upper=20),
        AgeBucketConfig(label="20-39", lower=20, upper=40),
        AgeBucketConfig(label="40-59", lower=40, upper=60),
        AgeBucketConfig(label="60-79", lower=60, upper=80),
        AgeBucketConfig(label="80+", lower=80),
    ]


class FiltersConfig(StrictModel):
    age_buckets: list[AgeBucketConfig] = Field(default_factory=_default_age_buckets)

    @field_validator("age_buckets")
    @classmethod
    def _unique_labels(cls, value: list[AgeBucketConfig]) -> list[AgeBucketConfig]:
        labels = [bucket.label for bucket in value]
        if len(labels) != len(set(labels)):
            raise ValueError("age bucket labels must be unique")
        if ALL_BUCKETS in labels:
            raise ValueError(f"{ALL_BUCKETS!r} is reserved and cannot label an age bucket")
        return value


class RunConfig(StrictModel):
    name: str
    secondary_category: str = ALL_CATEGORIES
    age_bucket: str = ALL_BUCKETS


class AppConfig(StrictModel):
    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    trim: TrimConfig = Field(default_factory=TrimConfig)
    density: DensityConfig = Field(default_factory=DensityConfig)
    groups: GroupsConfig = Field(default_factory=GroupsConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    runs: list[RunConfig] = Field(default_factory=lambda: [RunConfig(name="all")])

    @field_validator("runs")
    @classmethod
    def _unique_run_names(cls, value: list[RunConfig]) -> list[RunConfig]:
        names = [run.name for run in value]
        if len(names) != len(set(names)):
            raise ValueError("run names must be unique")
        return value


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
