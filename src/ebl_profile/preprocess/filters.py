from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from ebl_profile.config import ALL_BUCKETS, ALL_CATEGORIES, AgeBucketConfig, AppConfig, RunConfig
from ebl_profile.io.schema import CanonicalColumns
from ebl_profile.preprocess.records import normalize_label

LOGGER = logging.getLogger(__name__)


def _is_all(value: str | None, sentinel: str) -> bool:
    return value is None or str(value).strip().casefold() == sentinel.casefold()


@dataclass(frozen=True)
class FilterSpec:
    secondary_category: str = ALL_CATEGORIES
    age_bucket: str = ALL_BUCKETS

    @classmethod
    def from_run(cls, run: RunConfig) -> FilterSpec:
        return cls(secondary_category=run.secondary_category, age_bucket=run.age_bucket)

    @property
    def is_unfiltered(self) -> bool:
        return _is_all(self.secondary_category, ALL_CATEGORIES) and _is_all(
            self.age_bucket, ALL_BUCKETS
        )

    def as_dict(self) -> dict[str, str]:
        return {"secondary_category": self.secondary_category, "age_bucket": self.age_bucket}


def assign_age_buckets(ages: pd.Series, buckets: Sequence[AgeBucketConfig]) -> pd.Series:
    """Label each age with the first ``[lower, upper)`` bucket containing it."""
    labels = pd.Series(None, index=ages.index, dtype=object)
    values = pd.to_numeric(ages, errors="coerce").to_numpy(dtype=float)
    unassigned = np.isfinite(values)
    for bucket in buckets:
        upper = np.inf if bucket.upper is None else bucket.upper
        in_bucket = unassigned & (values >= bucket.lower) & (values < upper)
        labels[in_bucket] = bucket.label
        unassigned &= ~in_bucket
    return labels


def _category_mask(
    records: pd.DataFrame,
    value: str,
    label_map: Mapping[str, str],
) -> pd.Series:
    if CanonicalColumns.secondary_category not in records.columns:
        return pd.Series(False, index=records.index)
    wanted = normalize_label(value, label_map)
    return records[CanonicalColumns.secondary_category] == wanted


def _bucket_mask(
    records: pd.DataFrame,
    label: str,
    buckets: Sequence[AgeBucketConfig],
) -> pd.Series:
    known = {bucket.label for bucket in buckets}
    if label not in known:
        LOGGER.warning("Unknown age bucket %r; no records will match", label)
        return pd.Series(False, index=records.index)
    if CanonicalColumns.secondary_numeric not in records.columns:
        return pd.Series(False, index=records.index)
    return assign_age_buckets(records[CanonicalColumns.secondary_numeric], buckets) == label


def apply_filters(records: pd.DataFrame, spec: FilterSpec, config: AppConfig) -> pd.DataFrame:
    """Return the records matching every active predicate of ``spec``."""
    if spec.is_unfiltered:
        return records.reset_index(drop=True)
    mask = pd.Series(True, index=records.index)
    if not _is_all(spec.secondary_category, ALL_CATEGORIES):
        mask &= _category_mask(
            records,
            spec.secondary_category,
            config.normalization.secondary_category_labels,
        )
    if not _is_all(spec.age_bucket, ALL_BUCKETS):
        mask &= _bucket_mask(records, spec.age_bucket, config.filters.age_buckets)
    return records.loc[mask].reset_index(drop=True)
