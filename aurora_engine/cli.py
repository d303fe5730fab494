"""
Aurora Decision Engine: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the engine.
  5. Report result to stdout.

Install and run::

    pip install -e .
    aurora-engine --help
    aurora-engine validate-config
    aurora-engine decide data/horizon.json
    aurora-engine decide data/horizon.csv --json --output out/decision.json
    aurora-engine score-window --kp 5 --cloud 20 --elevation -15 --bz -4
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer

app = typer.Typer(
    name="aurora-engine",
    help="Aurora Decision Engine: deterministic aurora viewing decisions.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _fail(message: str) -> NoReturn:
    """Print ``message`` to stderr and exit with status 1."""
    typer.echo(f"[ERROR] {message}", err=True)
    raise typer.Exit(code=1)


def _app_config(config_path: Optional[str]):
    """Load and validate AppConfig; a missing or invalid file exits with status 1."""
    import tomllib

    from pydantic import ValidationError

    from aurora_engine.config import load_config

    try:
        return load_config(Path(config_path) if config_path else None)
    except FileNotFoundError as exc:
        _fail(str(exc))
    except (ValidationError, tomllib.TOMLDecodeError, ValueError) as exc:
        _fail(f"Config validation failed: {exc}")


def _start(config_path: Optional[str]):
    """Load config and install logging handlers; returns the AppConfig.

    ``debug = true`` forces DEBUG logging whatever ``[logging] level`` says.
    """
    from aurora_engine.utils.logging import configure_logging

    config = _app_config(config_path)
    logging_config = config.logging
    if config.debug:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(logging_config)
    return config


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _app_config(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Horizon hours:    {config.engine.horizon_hours}")
    typer.echo(f"  Merge adjacent:   {config.engine.merge_adjacent_windows}")
    typer.echo(f"  Drop invalid:     {config.engine.drop_invalid_windows}")
    typer.echo(f"  Cache TTL (s):    {config.cache.ttl_seconds}")
    typer.echo(f"  Location:         {config.location.name}")
    typer.echo(f"  Output dir:       {config.output.output_dir}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str, ensure_ascii=False))

    typer.echo("")


@app.command("decide")
def decide(
    input_path: str = typer.Argument(
        ...,
        help="Horizon file (.json or .csv) of raw windows in chronological order.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        help="Write the decision JSON to this path. A bare file name is placed in output_dir.",
    ),
    location: Optional[str] = typer.Option(
        None,
        "--location",
        help="Override the configured location name.",
    ),
    no_merge: bool = typer.Option(
        False,
        "--no-merge",
        help="Do not merge equal adjacent windows into the best window.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the decision as JSON instead of the summary.",
    ),
) -> None:
    """Compute the aurora decision for a horizon file.

    Only the first ``horizon_hours`` valid windows are scored. Windows with
    bad timestamps are dropped first (unless drop_invalid_windows = false).
    """
    from aurora_engine.engine.pipeline import compute_decision
    from aurora_engine.errors import AuroraEngineError
    from aurora_engine.ingestion.horizon_loader import load_horizon
    from aurora_engine.reporting.export import resolve_output_path, write_decision_json
    from aurora_engine.reporting.formatters import (
        format_decision_summary,
        format_horizon_grid,
    )

    config = _start(config_path)

    try:
        raws = load_horizon(Path(input_path))
    except (FileNotFoundError, ValueError) as exc:
        _fail(str(exc))

    try:
        decision = compute_decision(
            raws,
            merge_adjacent=config.engine.merge_adjacent_windows and not no_merge,
            drop_invalid=config.engine.drop_invalid_windows,
            travel_time_minutes=config.location.travel_time_minutes,
            origin=location or config.location.name,
            max_windows=config.engine.horizon_hours,
        )
    except AuroraEngineError as exc:
        _fail(str(exc))

    if as_json:
        typer.echo(json.dumps(decision.to_json_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(format_decision_summary(decision))
        typer.echo("")
        typer.echo(format_horizon_grid(decision))

    if output_path:
        written = write_decision_json(
            decision, resolve_output_path(output_path, config.output.output_dir)
        )
        typer.echo(f"[OK] Decision written to {written}", err=as_json)


@app.command("score-window")
def score_window_cmd(
    kp: float = typer.Option(..., "--kp", help="Planetary K-index (0–9)."),
    cloud: float = typer.Option(..., "--cloud", help="Cloud cover percent (0–100)."),
    elevation: float = typer.Option(..., "--elevation", help="Solar elevation in degrees."),
    bz: Optional[float] = typer.Option(None, "--bz", help="IMF Bz (GSM) in nT."),
    wind: Optional[float] = typer.Option(None, "--wind", help="Solar-wind speed in km/s."),
    density: Optional[float] = typer.Option(None, "--density", help="Proton density per cm³."),
    timestamp: Optional[str] = typer.Option(
        None,
        "--timestamp",
        help="Window start (ISO 8601). Defaults to the current hour.",
    ),
) -> None:
    """Score a single window and print its component breakdown."""
    from pydantic import ValidationError

    from aurora_engine.engine.normalizer import normalize_window
    from aurora_engine.engine.scorer import score_window
    from aurora_engine.errors import InvalidWindow
    from aurora_engine.models.window import RawWindow
    from aurora_engine.reporting.formatters import format_window_breakdown
    from aurora_engine.utils.time_utils import floor_to_hour, utcnow

    try:
        raw = RawWindow(
            timestamp=timestamp or floor_to_hour(utcnow()),
            cloud_cover_percent=cloud,
            solar_elevation_degrees=elevation,
            planetary_k_index=kp,
            solar_wind_speed_km_s=wind,
            bz_gsm_nano_tesla=bz,
            particle_density_per_cm3=density,
        )
        normalized = normalize_window(raw)
    except (ValidationError, InvalidWindow) as exc:
        _fail(str(exc))

    typer.echo(format_window_breakdown(normalized, score_window(normalized)))


if __name__ == "__main__":
    app()
