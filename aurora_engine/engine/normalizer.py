"""
Signal normalizer: clamp raw readings into the engine's value domains.

Processing rules:
  1. Parse the timestamp. Missing or unparsable → :class:`InvalidWindow`.
  2. cloud_cover_percent  → [0, 100].
  3. planetary_k_index    → [0, 9].
  4. solar_wind_speed     → absent when missing or negative, else kept.
  5. bz_gsm               → unclamped (negative values are physically meaningful).
  6. particle_density     → [0, +inf) when present.
  7. solar_elevation      → passed through unclamped.
  8. forecast_probability → [0, 100] when present (display only).

Numeric irregularities are never errors: upstream feeds are known to be
noisy, and the product must always render some answer.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from aurora_engine.errors import InvalidWindow
from aurora_engine.models.window import NormalizedWindow, RawWindow, SignalReading
from aurora_engine.taxonomy.aurora_taxonomy import (
    CLOUD_MAX_PCT,
    CLOUD_MIN_PCT,
    KP_MAX,
    KP_MIN,
    PROBABILITY_MAX_PCT,
    PROBABILITY_MIN_PCT,
)
from aurora_engine.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)


def normalize_window(raw: RawWindow, index: Optional[int] = None) -> NormalizedWindow:
    """Normalize one raw window.

    Args:
        raw:   Window as received from upstream.
        index: Position in the horizon, used only in error messages.

    Returns:
        :class:`NormalizedWindow` with every field inside its domain.

    Raises:
        InvalidWindow: If the timestamp is missing or unparsable.
    """
    try:
        timestamp = parse_timestamp(raw.timestamp)
    except ValueError as exc:
        raise InvalidWindow(raw.timestamp, str(exc), index=index) from exc

    cloud = _clamp(raw.cloud_cover_percent, CLOUD_MIN_PCT, CLOUD_MAX_PCT)
    kp    = _clamp(raw.planetary_k_index, KP_MIN, KP_MAX)

    if cloud != raw.cloud_cover_percent or kp != raw.planetary_k_index:
        logger.debug(
            "Clamped window %s: cloud %.1f→%.1f, kp %.2f→%.2f",
            timestamp.isoformat(), raw.cloud_cover_percent, cloud,
            raw.planetary_k_index, kp,
        )

    speed = raw.solar_wind_speed_km_s
    if speed is not None and speed < 0:
        logger.debug(
            "Negative solar-wind speed %.1f at %s treated as absent",
            speed, timestamp.isoformat(),
        )
        speed = None

    density = raw.particle_density_per_cm3
    if density is not None:
        density = max(0.0, density)

    probability = raw.forecast_probability_percent
    if probability is not None:
        probability = _clamp(probability, PROBABILITY_MIN_PCT, PROBABILITY_MAX_PCT)

    return NormalizedWindow(
        timestamp=timestamp,
        cloud_cover_percent=cloud,
        solar_elevation_degrees=raw.solar_elevation_degrees,
        planetary_k_index=kp,
        solar_wind_speed_km_s=_reading(speed),
        bz_gsm_nano_tesla=_reading(raw.bz_gsm_nano_tesla),
        particle_density_per_cm3=_reading(density),
        forecast_probability_percent=_reading(probability),
    )


def normalize_horizon(
    raws: Iterable[RawWindow],
    drop_invalid: bool = True,
) -> list[NormalizedWindow]:
    """Normalize a horizon, preserving input order.

    Args:
        raws:         Raw windows in chronological order.
        drop_invalid: When ``True`` (default) windows with a bad timestamp are
                      logged and dropped. When ``False`` the first
                      :class:`InvalidWindow` propagates.

    Returns:
        Normalized windows; may be empty if every window was dropped.
    """
    normalized: list[NormalizedWindow] = []
    dropped = 0

    for i, raw in enumerate(raws):
        try:
            normalized.append(normalize_window(raw, index=i))
        except InvalidWindow as exc:
            if not drop_invalid:
                raise
            dropped += 1
            logger.warning("Dropping window: %s", exc)

    if dropped:
        logger.warning(
            "normalize_horizon: dropped %d invalid window(s), kept %d",
            dropped, len(normalized),
        )
    return normalized


# ── Helpers ───────────────────────────────────────────────────────────────────

def _reading(value: Optional[float]) -> SignalReading:
    if value is None:
        return SignalReading.absent()
    return SignalReading.of(value)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
