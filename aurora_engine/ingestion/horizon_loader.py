"""
Horizon file loader for RawWindow records.

Formats
-------
JSON: either a bare array of window objects or ``{"windows": [...]}``.
CSV : one window per row with a header row; empty cells → missing.

Field names may be camelCase (``cloudCoverPercent``) or snake_case
(``cloud_cover_percent``).

Required fields:
  timestamp, cloudCoverPercent, solarElevationDegrees, planetaryKIndex

Optional fields (missing → signal absent):
  solarWindSpeedKmS, bzGsmNanoTesla, particleDensityPerCm3,
  forecastProbabilityPercent

Rows that fail validation (non-numeric readings, NaN/inf, missing required
readings) are logged and dropped so one bad upstream row never blanks the
whole forecast. Timestamp problems are left to the normalizer, which drops
them the same way.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from aurora_engine.models.window import RawWindow

logger = logging.getLogger(__name__)


def load_horizon(path: Path) -> list[RawWindow]:
    """Load a horizon file into :class:`RawWindow` objects, in file order.

    Args:
        path: ``.json`` or ``.csv`` file.

    Returns:
        Raw windows that passed validation.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the extension is unsupported or the JSON shape is wrong.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Horizon file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        rows = _read_json_rows(path)
    elif suffix == ".csv":
        rows = _read_csv_rows(path)
    else:
        raise ValueError(
            f"Unsupported horizon file type '{suffix}'. Expected .json or .csv."
        )

    windows = parse_window_rows(rows, source=path.name)
    logger.info("Loaded %d window(s) from %s", len(windows), path.name)
    return windows


def parse_window_rows(rows: list[dict[str, Any]], source: str = "<memory>") -> list[RawWindow]:
    """Validate row dicts into :class:`RawWindow`, dropping rows that fail.

    Args:
        rows:   Row dicts (camelCase or snake_case keys).
        source: Label used in log messages.

    Returns:
        Valid raw windows in input order.
    """
    windows: list[RawWindow] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        try:
            windows.append(RawWindow.model_validate(row))
        except ValidationError as exc:
            errors.append((i, _summarize(exc)))

    if errors:
        max_shown = 10
        detail = "; ".join(f"row {i}: {msg}" for i, msg in errors[:max_shown])
        suffix = f"; … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        logger.warning(
            "Dropped %d invalid row(s) from %s: %s%s",
            len(errors), source, detail, suffix,
        )
    return windows


# ── Private helpers ────────────────────────────────────────────────────────────

def _read_json_rows(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("windows")
    if not isinstance(data, list):
        raise ValueError(
            f"{path.name}: expected a JSON array or an object with a 'windows' array."
        )
    return [row for row in data if isinstance(row, dict)]


def _read_csv_rows(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            logger.warning("Horizon CSV is empty: %s", path)
            return []
        return [
            {key.strip(): _csv_value(val) for key, val in row.items() if key}
            for row in reader
        ]


def _csv_value(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _summarize(exc: ValidationError) -> str:
    return ", ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
