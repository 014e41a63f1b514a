from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ebl_profile.config import ColumnsConfig, ConfigError

RawRows = pd.DataFrame | Sequence[Mapping[str, Any]]


@dataclass(frozen=True)
class CanonicalColumns:
    category: str = "category"
    value: str = "value"
    secondary_numeric: str = "secondary_numeric"
    secondary_category: str = "secondary_category"


def configured_source_columns(columns: ColumnsConfig) -> dict[str, str]:
    """Map configured source column names to canonical record columns."""
    mapping = {
        columns.category: CanonicalColumns.category,
        columns.value: CanonicalColumns.value,
    }
    if columns.secondary_numeric:
        mapping[columns.secondary_numeric] = CanonicalColumns.secondary_numeric
    if columns.secondary_category:
        mapping[columns.secondary_category] = CanonicalColumns.secondary_category
    return mapping


def rows_to_frame(rows: RawRows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows.copy()
    return pd.DataFrame.from_records(list(rows))


def require_columns(df: pd.DataFrame, columns: ColumnsConfig) -> pd.DataFrame:
    """Fail when a configured source column is absent from a non-empty table."""
    if df.empty and len(df.columns) == 0:
        return df
    missing = [source for source in configured_source_columns(columns) if source not in df.columns]
    if missing:
        missing_str = ", ".join(missing)
        raise ConfigError(f"Missing configured columns in input: {missing_str}")
    return df
