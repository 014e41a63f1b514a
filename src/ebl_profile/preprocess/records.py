from __future__ import annotations

import logging
from collections.abc import Mapping

import numpy as np
import pandas as pd

from ebl_profile.config import AppConfig
from ebl_profile.io.schema import (
    CanonicalColumns,
    RawRows,
    configured_source_columns,
    rows_to_frame,
)

LOGGER = logging.getLogger(__name__)


def _clean_text(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.strip()


def _coerce_finite(series: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(_clean_text(series), errors="coerce").astype(float)
    return numeric.where(np.isfinite(numeric))


def normalize_label(value: str, label_map: Mapping[str, str]) -> str:
    stripped = str(value).strip()
    return label_map.get(stripped.upper(), stripped)


def normalize_secondary_category(series: pd.Series, label_map: Mapping[str, str]) -> pd.Series:
    """Map recognized tokens to canonical labels; pass everything else through stripped."""
    stripped = _clean_text(series)
    return stripped.str.upper().map(label_map).fillna(stripped)


def empty_records(config: AppConfig) -> pd.DataFrame:
    columns = list(configured_source_columns(config.columns).values())
    frame = pd.DataFrame({column: pd.Series(dtype=object) for column in columns})
    for column in (CanonicalColumns.value, CanonicalColumns.secondary_numeric):
        if column in frame.columns:
            frame[column] = frame[column].astype(float)
    return frame


def normalize_records(rows: RawRows, config: AppConfig) -> pd.DataFrame:
    """Coerce raw rows into typed records, silently dropping invalid rows.

    Columns of the result follow ``CanonicalColumns``; the secondary columns are
    present only when the matching source column is configured.
    """
    df = rows_to_frame(rows)
    source_columns = configured_source_columns(config.columns)
    if df.empty or any(source not in df.columns for source in source_columns):
        LOGGER.info("Normalized 0 of %d rows", len(df))
        return empty_records(config)

    working = df[list(source_columns)].rename(columns=source_columns).reset_index(drop=True)
    working[CanonicalColumns.category] = _clean_text(working[CanonicalColumns.category])
    working[CanonicalColumns.value] = _coerce_finite(working[CanonicalColumns.value])

    category = working[CanonicalColumns.category]
    keep = (
        (category != "")
        & (category != config.normalization.category_exclusion_label)
        & working[CanonicalColumns.value].notna()
    )

    if CanonicalColumns.secondary_numeric in working.columns:
        working[CanonicalColumns.secondary_numeric] = _coerce_finite(
            working[CanonicalColumns.secondary_numeric]
        )
        keep &= working[CanonicalColumns.secondary_numeric].notna()

    if CanonicalColumns.secondary_category in working.columns:
        working[CanonicalColumns.secondary_category] = normalize_secondary_category(
            working[CanonicalColumns.secondary_category],
            config.normalization.secondary_category_labels,
        )
        keep &= working[CanonicalColumns.secondary_category] != ""

    records = working.loc[keep].reset_index(drop=True)
    LOGGER.info(
        "Normalized %d of %d rows (%d dropped)",
        len(records),
        len(working),
        len(working) - len(records),
    )
    return records
