from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from ebl_profile.io.schema import CanonicalColumns

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class GroupSummary:
    count: int
    median: float
    stddev: float
    minimum: float
    maximum: float
    secondary_mean: float
    secondary_mode: str

    @property
    def has_secondary_mean(self) -> bool:
        return not math.isnan(self.secondary_mean)


def population_stddev(values: np.ndarray) -> float:
    if values.size == 0:
        return math.nan
    if np.all(values == values[0]):
        return 0.0
    mean = values.mean()
    return float(np.sqrt(np.mean((values - mean) ** 2)))


def first_mode(values: pd.Series, default: str = UNKNOWN_LABEL) -> str:
    """Most frequent value; ties go to whichever was encountered first."""
    cleaned = values.dropna().astype(str)
    if cleaned.empty:
        return default
    counts = cleaned.value_counts(sort=False).reindex(cleaned.drop_duplicates())
    return str(counts.idxmax())


def summarize_group(group: pd.DataFrame, unknown_label: str = UNKNOWN_LABEL) -> GroupSummary:
    values = group[CanonicalColumns.value].to_numpy(dtype=float)
    if values.size == 0:
        raise ValueError("cannot summarize an empty group")

    if CanonicalColumns.secondary_numeric in group.columns:
        secondary = group[CanonicalColumns.secondary_numeric].dropna().to_numpy(dtype=float)
        secondary_mean = float(secondary.mean()) if secondary.size else math.nan
    else:
        secondary_mean = math.nan

    if CanonicalColumns.secondary_category in group.columns:
        secondary_mode = first_mode(group[CanonicalColumns.secondary_category], unknown_label)
    else:
        secondary_mode = unknown_label

    return GroupSummary(
        count=int(values.size),
        median=float(np.median(values)),
        stddev=population_stddev(values),
        minimum=float(values.min()),
        maximum=float(values.max()),
        secondary_mean=secondary_mean,
        secondary_mode=secondary_mode,
    )
