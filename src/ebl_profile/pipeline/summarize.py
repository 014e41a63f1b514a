from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any

import pandas as pd

from ebl_profile.config import AppConfig
from ebl_profile.features.grouping import group_by_category, master_category_order
from ebl_profile.io.schema import CanonicalColumns, RawRows, require_columns, rows_to_frame
from ebl_profile.preprocess.filters import FilterSpec, apply_filters
from ebl_profile.preprocess.records import normalize_records
from ebl_profile.stats.aggregate import GroupSummary, summarize_group
from ebl_profile.stats.density import DensityCurve, estimate_density, log_grid
from ebl_profile.stats.trim import apply_bounds, percentile_bounds

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryDistribution:
    category: str
    curve: DensityCurve
    summary: GroupSummary


@dataclass(frozen=True)
class FacetedSummary:
    master_order: tuple[str, ...]
    filters: FilterSpec
    lower_bound: float
    upper_bound: float
    grid: tuple[float, ...]
    n_filtered: int
    n_trimmed: int
    groups: tuple[CategoryDistribution, ...]

    @property
    def categories(self) -> tuple[str, ...]:
        """Categories with enough data to appear, in master order."""
        return tuple(group.category for group in self.groups)

    def group(self, category: str) -> CategoryDistribution | None:
        for group in self.groups:
            if group.category == category:
                return group
        return None

    def density_frame(self) -> pd.DataFrame:
        frames = [
            group.curve.to_frame().assign(category=group.category) for group in self.groups
        ]
        if not frames:
            return pd.DataFrame(columns=["category", "x", "density"])
        return pd.concat(frames, ignore_index=True)[["category", "x", "density"]]

    def stats_frame(self) -> pd.DataFrame:
        rows = [{"category": group.category, **asdict(group.summary)} for group in self.groups]
        columns = ["category", *(field.name for field in fields(GroupSummary))]
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self) -> dict[str, Any]:
        return {
            "master_order": list(self.master_order),
            "filters": self.filters.as_dict(),
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "n_filtered": self.n_filtered,
            "n_trimmed": self.n_trimmed,
            "groups": [
                {
                    "category": group.category,
                    "summary": {
                        **asdict(group.summary),
                        "secondary_mean": (
                            group.summary.secondary_mean
                            if group.summary.has_secondary_mean
                            else None
                        ),
                    },
                    "density": [list(point) for point in group.curve.points],
                }
                for group in self.groups
            ],
        }


class DistributionPipeline:
    """Normalizes a case table once and summarizes it under any filter combination.

    The normalized records and the master category order are fixed at construction.
    ``summarize`` never mutates them, so one instance can serve repeated and
    concurrent calls.
    """

    def __init__(self, rows: RawRows, config: AppConfig) -> None:
        frame = require_columns(rows_to_frame(rows), config.columns)
        self._config = config.model_copy(deep=True)
        self._records = normalize_records(frame, config)
        self._master_order = master_category_order(self._records)
        LOGGER.info(
            "Pipeline ready: %d records across %d categories",
            len(self._records),
            len(self._master_order),
        )

    @property
    def config(self) -> AppConfig:
        return self._config.model_copy(deep=True)

    @property
    def master_order(self) -> tuple[str, ...]:
        return self._master_order

    @property
    def records(self) -> pd.DataFrame:
        return self._records.copy()

    def summarize(self, filters: FilterSpec | None = None) -> FacetedSummary:
        spec = filters or FilterSpec()
        config = self._config

        filtered = apply_filters(self._records, spec, config)
        lower, upper = percentile_bounds(
            filtered[CanonicalColumns.value],
            config.trim.percentile,
            lower=config.trim.lower_bound,
        )
        trimmed = apply_bounds(filtered, lower, upper)
        grid = log_grid(lower, upper, config.density.grid_size)

        distributions: list[CategoryDistribution] = []
        for category, group in group_by_category(trimmed, self._master_order).items():
            if len(group) < config.groups.min_group_size:
                continue
            distributions.append(
                CategoryDistribution(
                    category=category,
                    curve=estimate_density(
                        group[CanonicalColumns.value],
                        grid,
                        config.density.bandwidth,
                    ),
                    summary=summarize_group(group, unknown_label=config.groups.unknown_label),
                )
            )

        LOGGER.debug(
            "Summarized %s: %d filtered, %d trimmed to [%g, %g], %d/%d categories",
            spec.as_dict(),
            len(filtered),
            len(trimmed),
            lower,
            upper,
            len(distributions),
            len(self._master_order),
        )
        return FacetedSummary(
            master_order=self._master_order,
            filters=spec,
            lower_bound=lower,
            upper_bound=upper,
            grid=tuple(float(value) for value in grid),
            n_filtered=len(filtered),
            n_trimmed=len(trimmed),
            groups=tuple(distributions),
        )
