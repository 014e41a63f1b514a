from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ebl_profile.io.schema import CanonicalColumns


def master_category_order(records: pd.DataFrame) -> tuple[str, ...]:
    """Distinct categories in first-occurrence order."""
    if records.empty:
        return ()
    return tuple(str(value) for value in pd.unique(records[CanonicalColumns.category]))


def group_by_category(
    records: pd.DataFrame,
    master_order: Sequence[str],
) -> dict[str, pd.DataFrame]:
    """Partition records by category, keyed and ordered by ``master_order``.

    Every key of ``master_order`` is present; categories without records map to an
    empty frame with the same columns. Categories outside ``master_order`` are ignored.
    """
    groups: dict[str, pd.DataFrame] = {}
    if not records.empty:
        for key, frame in records.groupby(CanonicalColumns.category, sort=False):
            groups[str(key)] = frame.reset_index(drop=True)
    empty = records.iloc[0:0]
    return {category: groups.get(category, empty) for category in master_order}
