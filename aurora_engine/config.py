"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local secrets and env overrides (gitignored)
  4. Environment variables       : ``AURORA_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Scoring thresholds are NOT configurable: they live as constants in
``aurora_engine.taxonomy.aurora_taxonomy`` so every deployment produces the
same decision for the same inputs. Configuration only covers how the engine
is driven (merging, invalid-window handling), caching, the narrative's
location details, output paths, and logging.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class EngineConfig(BaseModel):
    """How the decision pipeline is driven."""

    model_config = ConfigDict(frozen=True)

    horizon_hours: int = 48
    merge_adjacent_windows: bool = True
    drop_invalid_windows: bool = True

    @field_validator("horizon_hours")
    @classmethod
    def validate_horizon(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"horizon_hours must be >= 1, got {v}.")
        return v


class CacheConfig(BaseModel):
    """Decision cache settings for the serving layer."""

    model_config = ConfigDict(frozen=True)

    ttl_seconds: int = 3600
    max_entries: int = 256

    @field_validator("ttl_seconds", "max_entries")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Cache settings must be >= 1, got {v}.")
        return v


class LocationConfig(BaseModel):
    """Viewing location used for cache keys and the narrative."""

    model_config = ConfigDict(frozen=True)

    name: str = "Tromsø"
    travel_time_minutes: Optional[int] = None

    @field_validator("travel_time_minutes")
    @classmethod
    def validate_travel_time(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"travel_time_minutes must be >= 0, got {v}.")
        return v


class OutputConfig(BaseModel):
    """Filesystem paths for exported decisions."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs/decisions"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    The CLI and serving code receive an ``AppConfig`` instance.
    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    engine: EngineConfig = EngineConfig()
    cache: CacheConfig = CacheConfig()
    location: LocationConfig = LocationConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

# env var → (section, or None for top level; key; parser)
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "AURORA_ENGINE_LOG_LEVEL":         ("logging", "level", str),
    "AURORA_ENGINE_CACHE_TTL_SECONDS": ("cache", "ttl_seconds", int),
    "AURORA_ENGINE_LOCATION":          ("location", "name", str),
    "AURORA_ENGINE_DEBUG":             (None, "debug", lambda v: v.lower() in ("1", "true", "yes")),
}


def _project_root() -> Path:
    """Nearest ancestor of this package holding ``pyproject.toml``."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build the validated ``AppConfig``.

    Args:
        config_path: TOML file to load. Defaults to
            ``<project_root>/config/default.toml``. A ``local.toml`` next to
            it is merged on top when present.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: If a merged value is out of range.
    """
    root = _project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    raw = _read_toml(path)
    local = path.parent / "local.toml"
    if local.exists():
        raw = _deep_merge(raw, _read_toml(local))

    return _build_app_config(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in, recursing into tables."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay the ``AURORA_ENGINE_*`` variables listed in ``_ENV_OVERRIDES``."""
    for name, (section, key, parse) in _ENV_OVERRIDES.items():
        value = os.environ.get(name)
        if not value:
            continue
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = parse(value)
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Validate each TOML table into its section model."""
    project = raw.get("project", {})
    return AppConfig(
        engine=EngineConfig(**raw.get("engine", {})),
        cache=CacheConfig(**raw.get("cache", {})),
        location=LocationConfig(**raw.get("location", {})),
        output=OutputConfig(**raw.get("output", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
