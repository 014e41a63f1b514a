from __future__ import annotations

import logging
from pathlib import Path

from ebl_profile.config import AppConfig
from ebl_profile.io.read import load_rows
from ebl_profile.pipeline.summarize import DistributionPipeline, FacetedSummary
from ebl_profile.preprocess.filters import FilterSpec

LOGGER = logging.getLogger(__name__)


def build_pipeline(csv_path: Path, config: AppConfig) -> DistributionPipeline:
    return DistributionPipeline(load_rows(csv_path), config)


def summarize_runs(
    pipeline: DistributionPipeline,
    config: AppConfig,
) -> dict[str, FacetedSummary]:
    results: dict[str, FacetedSummary] = {}
    for run in config.runs:
        results[run.name] = pipeline.summarize(FilterSpec.from_run(run))
        LOGGER.info(
            "Run %s: %d of %d categories summarized",
            run.name,
            len(results[run.name].groups),
            len(pipeline.master_order),
        )
    return results


def run_all(csv_path: Path, config: AppConfig) -> dict[str, FacetedSummary]:
    """Summarize every configured run against one normalized case table."""
    return summarize_runs(build_pipeline(csv_path, config), config)
