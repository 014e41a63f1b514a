from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from ebl_profile.config import (
    ALL_BUCKETS,
    ALL_CATEGORIES,
    DEFAULT_CONFIG_PATH,
    AppConfig,
    ConfigError,
    load_config,
)
from ebl_profile.logging import LogLevel, configure_logging
from ebl_profile.pipeline.run_all import build_pipeline, summarize_runs
from ebl_profile.pipeline.summarize import DistributionPipeline
from ebl_profile.preprocess.filters import FilterSpec

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        if DEFAULT_CONFIG_PATH.is_file():
            return load_config(DEFAULT_CONFIG_PATH)
        return AppConfig()
    return load_config(config_path)


def _build_pipeline(csv: Path, cfg: AppConfig) -> DistributionPipeline:
    try:
        return build_pipeline(csv, cfg)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, sort_keys=True))


@app.command()
def summarize(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    sex: str = typer.Option(ALL_CATEGORIES, help="Secondary category filter."),
    age_bucket: str = typer.Option(ALL_BUCKETS, help="Age bucket label filter."),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, case_sensitive=False, help="Logging level for stderr output."
    ),
) -> None:
    """Print one faceted distribution summary as JSON."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    pipeline = _build_pipeline(csv, cfg)
    result = pipeline.summarize(FilterSpec(secondary_category=sex, age_bucket=age_bucket))
    _echo_json(result.to_dict())


@app.command("run-all")
def run_all_command(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, case_sensitive=False, help="Logging level for stderr output."
    ),
) -> None:
    """Summarize every configured run and print the results keyed by run name."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    if not cfg.runs:
        raise typer.BadParameter("Configuration defines no runs", param_hint="--config")
    results = summarize_runs(_build_pipeline(csv, cfg), cfg)
    _echo_json({name: summary.to_dict() for name, summary in results.items()})


@app.command()
def categories(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, case_sensitive=False, help="Logging level for stderr output."
    ),
) -> None:
    """Print the master category order, one category per line."""
    configure_logging(log_level)
    pipeline = _build_pipeline(csv, _load_app_config(config))
    for category in pipeline.master_order:
        typer.echo(category)


if __name__ == "__main__":  # pragma: no cover
    app()
