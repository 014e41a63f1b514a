from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from ebl_profile.io.schema import CanonicalColumns

DEFAULT_LOWER_BOUND = 1.0


def empirical_quantile(values: np.ndarray, q: float) -> float:
    """Quantile by linear interpolation between the order statistics at q*(n-1)."""
    if values.size == 0:
        raise ValueError("quantile of an empty sequence is undefined")
    if not 0.0 <= q <= 1.0:
        raise ValueError("q must be within [0, 1]")
    return float(np.quantile(values.astype(float), q, method="linear"))


def percentile_bounds(
    values: Sequence[float] | np.ndarray | pd.Series,
    q: float,
    lower: float = DEFAULT_LOWER_BOUND,
) -> tuple[float, float]:
    """Return the ``(lower, quantile)`` trim domain, or ``(lower, lower)`` when empty."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return float(lower), float(lower)
    return float(lower), empirical_quantile(arr, q)


def apply_bounds(records: pd.DataFrame, lower: float, upper: float) -> pd.DataFrame:
    """Keep records whose value lies in the inclusive range ``[lower, upper]``."""
    values = records[CanonicalColumns.value]
    return records.loc[(values >= lower) & (values <= upper)].reset_index(drop=True)
