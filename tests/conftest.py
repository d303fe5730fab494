"""
Shared pytest fixtures for the Aurora Decision Engine test suite.

Provides:
  - ``T0``: the start of the reference horizon (2025-01-10 18:00 UTC).
  - ``make_raw``: factory for ``RawWindow`` objects offset from ``T0`` by hour.
  - ``make_scored``: factory for ``ScoredWindow`` objects with an exact ADS,
    for scanner and directive tests that should not depend on the scorer.
  - ``night_horizon``: a 48-hour raw horizon with a single clear, active night.
  - ``config_file``: a minimal TOML config written to ``tmp_path``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import pytest

from aurora_engine.engine.scorer import classify_ads
from aurora_engine.models.window import RawWindow, ScoreComponents, ScoredWindow
from aurora_engine.taxonomy.aurora_taxonomy import Classification, TwilightPhase

T0 = datetime(2025, 1, 10, 18, 0, tzinfo=timezone.utc)

_ENV_VARS = (
    "AURORA_ENGINE_LOG_LEVEL",
    "AURORA_ENGINE_CACHE_TTL_SECONDS",
    "AURORA_ENGINE_LOCATION",
    "AURORA_ENGINE_DEBUG",
)


def hour(offset: int) -> datetime:
    """``T0`` plus ``offset`` hours."""
    return T0 + timedelta(hours=offset)


def raw_window(
    offset: int = 0,
    kp: float = 5.0,
    cloud: float = 0.0,
    elevation: float = -20.0,
    **kwargs,
) -> RawWindow:
    """Build a RawWindow at ``T0 + offset`` hours; extra kwargs are passed through."""
    kwargs.setdefault("timestamp", hour(offset))
    return RawWindow(
        cloud_cover_percent=cloud,
        solar_elevation_degrees=elevation,
        planetary_k_index=kp,
        **kwargs,
    )


def scored_window(
    offset: int,
    ads: int,
    dark: bool = True,
    kp_score: float = 30.0,
    cloud_penalty: float = 0.0,
    probability: Optional[float] = None,
) -> ScoredWindow:
    """Build a ScoredWindow with an exact ADS, bypassing the scorer."""
    if not dark:
        ads = 0
    return ScoredWindow(
        timestamp=hour(offset),
        ads=ads,
        classification=classify_ads(ads) if dark else Classification.POOR,
        is_dark_enough=dark,
        component_breakdown=ScoreComponents(
            kp_score=kp_score,
            bz_score=0.0,
            wind_score=0.0,
            density_score=0.0,
            cloud_penalty=cloud_penalty,
            raw_score=kp_score - cloud_penalty,
        ),
        twilight_phase=TwilightPhase.NIGHT if dark else TwilightPhase.DAY,
        forecast_probability_percent=probability,
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AURORA_ENGINE_* variables from the host out of the test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_raw() -> Callable[..., RawWindow]:
    return raw_window


@pytest.fixture
def make_scored() -> Callable[..., ScoredWindow]:
    return scored_window


@pytest.fixture
def night_horizon() -> list[RawWindow]:
    """48 hourly windows: daylight, then a dark night peaking at hours 4–5.

    Hours 0–1 are bright (sun above -6°); hours 2–13 are dark; the rest are
    daylight again. Activity peaks at hours 4 and 5 (Kp 7, clear sky).
    """
    windows: list[RawWindow] = []
    for i in range(48):
        dark = 2 <= i <= 13
        kp = 7.0 if i in (4, 5) else 3.0
        windows.append(
            raw_window(
                i,
                kp=kp,
                cloud=0.0 if i in (4, 5) else 40.0,
                elevation=-25.0 if dark else 5.0,
                bz_gsm_nano_tesla=-5.0 if i in (4, 5) else 1.0,
                solar_wind_speed_km_s=500.0,
            )
        )
    return windows


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A minimal TOML config in an isolated directory (no local.toml)."""
    path = tmp_path / "config" / "test.toml"
    path.parent.mkdir(parents=True)
    path.write_text(
        "[engine]\n"
        "horizon_hours = 48\n"
        "merge_adjacent_windows = true\n"
        "drop_invalid_windows = true\n"
        "\n"
        "[cache]\n"
        "ttl_seconds = 600\n"
        "max_entries = 16\n"
        "\n"
        "[location]\n"
        'name = "Abisko"\n'
        "travel_time_minutes = 45\n"
        "\n"
        "[output]\n"
        f'output_dir = "{(tmp_path / "out").as_posix()}"\n'
        "\n"
        "[logging]\n"
        'level = "WARNING"\n'
        "json_format = false\n",
        encoding="utf-8",
    )
    return path
