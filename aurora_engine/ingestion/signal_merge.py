"""
Assemble an hourly RawWindow horizon from independently fetched feeds.

Upstream sources (weather, space weather, probability estimates) are fetched
in parallel by the serving layer and may each fail or return partial data.
This module merges whatever arrived into one horizon:

  - Weather (cloud cover + solar elevation) is required per hour. Hours
    without it are skipped with a warning.
  - Planetary Kp is published on a 3-hour cadence, so the latest earlier Kp
    is carried forward into hours without a fresh reading. Hours before any
    Kp reading are skipped.
  - Solar-wind speed, Bz, and density are never carried forward: an hour
    without a fresh reading gets them as absent.
  - Probability estimates are attached when present, for display only.

Feed mappings are keyed by datetime; keys are floored to the hour before
matching.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, TypeVar

from aurora_engine.models.window import RawWindow
from aurora_engine.utils.time_utils import floor_to_hour, hourly_range, parse_timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WeatherReading:
    """Local weather and sun position for one hour."""

    cloud_cover_percent:     float
    solar_elevation_degrees: float


@dataclass(frozen=True)
class SpaceWeatherReading:
    """Geomagnetic and solar-wind readings for one hour.

    Attributes:
        planetary_k_index:        Planetary Kp (0–9).
        solar_wind_speed_km_s:    Solar-wind speed, or ``None`` if the feed failed.
        bz_gsm_nano_tesla:        IMF Bz (GSM), or ``None``.
        particle_density_per_cm3: Proton density, or ``None``.
    """

    planetary_k_index:        float
    solar_wind_speed_km_s:    Optional[float] = None
    bz_gsm_nano_tesla:        Optional[float] = None
    particle_density_per_cm3: Optional[float] = None


def merge_signal_feeds(
    start:         datetime,
    hours:         int,
    weather:       Mapping[datetime, WeatherReading],
    space_weather: Mapping[datetime, SpaceWeatherReading],
    probabilities: Optional[Mapping[datetime, float]] = None,
) -> list[RawWindow]:
    """Build up to ``hours`` hourly raw windows starting at ``start``.

    Args:
        start:         Horizon start; floored to the hour.
        hours:         Number of hourly slots to attempt.
        weather:       Weather readings keyed by hour.
        space_weather: Space-weather readings keyed by hour.
        probabilities: Optional probability estimates keyed by hour.

    Returns:
        Raw windows in chronological order. Skipped hours are omitted.
    """
    weather_by_hour = _by_hour(weather)
    space_by_hour   = _by_hour(space_weather)
    prob_by_hour    = _by_hour(probabilities or {})

    first_slot = floor_to_hour(parse_timestamp(start))
    last_kp = _latest_kp_before(space_by_hour, first_slot)

    windows: list[RawWindow] = []
    skipped: list[str] = []

    for slot in hourly_range(first_slot, hours):
        space = space_by_hour.get(slot)
        if space is not None:
            last_kp = space.planetary_k_index

        wx = weather_by_hour.get(slot)
        if wx is None or last_kp is None:
            skipped.append(slot.isoformat())
            continue

        windows.append(
            RawWindow(
                timestamp=slot,
                cloud_cover_percent=wx.cloud_cover_percent,
                solar_elevation_degrees=wx.solar_elevation_degrees,
                planetary_k_index=last_kp,
                solar_wind_speed_km_s=space.solar_wind_speed_km_s if space else None,
                bz_gsm_nano_tesla=space.bz_gsm_nano_tesla if space else None,
                particle_density_per_cm3=space.particle_density_per_cm3 if space else None,
                forecast_probability_percent=prob_by_hour.get(slot),
            )
        )

    if skipped:
        logger.warning(
            "merge_signal_feeds: skipped %d of %d hour(s) missing weather or Kp (first: %s)",
            len(skipped), hours, skipped[0],
        )
    return windows


# ── Helpers ───────────────────────────────────────────────────────────────────

def _by_hour(feed: Mapping[datetime, T]) -> dict[datetime, T]:
    return {floor_to_hour(parse_timestamp(ts)): val for ts, val in feed.items()}


def _latest_kp_before(
    space_by_hour: dict[datetime, SpaceWeatherReading],
    slot: datetime,
) -> Optional[float]:
    earlier = [ts for ts in space_by_hour if ts < slot]
    if not earlier:
        return None
    return space_by_hour[max(earlier)].planetary_k_index
