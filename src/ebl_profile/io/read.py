from __future__ import annotations

from pathlib import Path

import pandas as pd


def load_rows(csv_path: Path) -> pd.DataFrame:
    """Read a case table with every cell kept as its raw string."""
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    return pd.read_csv(csv_path, encoding="utf-8-sig", dtype=str, keep_default_na=False)
