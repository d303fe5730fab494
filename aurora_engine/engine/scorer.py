"""
Score composer: converts one NormalizedWindow into a ScoredWindow.

Score formula (weighted sum, clamped to 0–100)
----------------------------------------------
    raw = (
        kp_score          # (Kp / 9) * 60          dominant term, max 60
        + bz_score        # stepped on Bz           max 25, 0 if absent
        + wind_score      # stepped on speed        max 15, 0 if absent
        + density_score   # stepped on density      max 10, 0 if absent
        - cloud_penalty   # (cloud / 100) * 50      always applied, max 50
    )
    ads = round(clamp(raw, 0, 100))

Step tables
-----------
bz_score (more negative = southward IMF = more favourable):
    bz < -3.0 → 25;  < -1.5 → 18;  < 0 → 12;  < 1.5 → 5;  else 0
wind_score:
    speed > 600 → 15;  > 450 → 10;  > 350 → 5;  > 300 → 2;  else 0
density_score:
    density > 10 → 10;  > 5 → 6;  > 2 → 3;  else 0

Darkness veto
-------------
When the sun is above -6° the window gets ads = 0 and classification
"poor" no matter what the sum says. The component breakdown is still
recorded so the veto is auditable.

Classification (post-veto ads)
------------------------------
    >= 70 excellent;  >= 50 good;  >= 30 moderate;  else poor
"""

from __future__ import annotations

import math

from aurora_engine.engine.darkness import is_dark_enough, twilight_phase
from aurora_engine.models.window import (
    NormalizedWindow,
    ScoreComponents,
    ScoredWindow,
    SignalReading,
)
from aurora_engine.taxonomy.aurora_taxonomy import (
    ADS_MAX,
    ADS_MIN,
    EXCELLENT_MIN_ADS,
    GOOD_MIN_ADS,
    KP_MAX,
    MODERATE_MIN_ADS,
    Classification,
)

KP_WEIGHT = 60.0
CLOUD_PENALTY_WEIGHT = 50.0

# (exclusive upper bound, points), checked in order; first match wins.
_BZ_STEPS: tuple[tuple[float, float], ...] = (
    (-3.0, 25.0),
    (-1.5, 18.0),
    (0.0,  12.0),
    (1.5,   5.0),
)

# (exclusive lower bound, points), checked in order; first match wins.
_WIND_STEPS: tuple[tuple[float, float], ...] = (
    (600.0, 15.0),
    (450.0, 10.0),
    (350.0,  5.0),
    (300.0,  2.0),
)

_DENSITY_STEPS: tuple[tuple[float, float], ...] = (
    (10.0, 10.0),
    (5.0,   6.0),
    (2.0,   3.0),
)


def compute_components(window: NormalizedWindow) -> ScoreComponents:
    """Compute the five weighted sub-scores and their unclamped sum."""
    kp_score      = (window.planetary_k_index / KP_MAX) * KP_WEIGHT
    bz_score      = _bz_score(window.bz_gsm_nano_tesla)
    wind_score    = _step_above(window.solar_wind_speed_km_s, _WIND_STEPS)
    density_score = _step_above(window.particle_density_per_cm3, _DENSITY_STEPS)
    cloud_penalty = (window.cloud_cover_percent / 100.0) * CLOUD_PENALTY_WEIGHT

    raw_score = kp_score + bz_score + wind_score + density_score - cloud_penalty

    return ScoreComponents(
        kp_score=kp_score,
        bz_score=bz_score,
        wind_score=wind_score,
        density_score=density_score,
        cloud_penalty=cloud_penalty,
        raw_score=raw_score,
    )


def score_window(window: NormalizedWindow) -> ScoredWindow:
    """Score one normalized window.

    Cannot fail for a well-formed :class:`NormalizedWindow`.

    Returns:
        :class:`ScoredWindow` with an integer ADS in [0, 100].
    """
    components = compute_components(window)
    dark = is_dark_enough(window.solar_elevation_degrees)

    if dark:
        ads = round_half_up(_clamp(components.raw_score, ADS_MIN, ADS_MAX))
    else:
        ads = 0

    probability = window.forecast_probability_percent

    return ScoredWindow(
        timestamp=window.timestamp,
        ads=ads,
        classification=classify_ads(ads) if dark else Classification.POOR,
        is_dark_enough=dark,
        component_breakdown=components,
        twilight_phase=twilight_phase(window.solar_elevation_degrees),
        forecast_probability_percent=probability.value if probability.is_present else None,
    )


def classify_ads(ads: float) -> Classification:
    """Map a score to its tier: >=70 excellent, >=50 good, >=30 moderate."""
    if ads >= EXCELLENT_MIN_ADS:
        return Classification.EXCELLENT
    if ads >= GOOD_MIN_ADS:
        return Classification.GOOD
    if ads >= MODERATE_MIN_ADS:
        return Classification.MODERATE
    return Classification.POOR


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (no banker's rounding)."""
    return int(math.floor(value + 0.5))


# ── Helpers ───────────────────────────────────────────────────────────────────

def _bz_score(reading: SignalReading) -> float:
    if not reading.is_present:
        return 0.0
    for upper, points in _BZ_STEPS:
        if reading.value < upper:
            return points
    return 0.0


def _step_above(reading: SignalReading, steps: tuple[tuple[float, float], ...]) -> float:
    if not reading.is_present:
        return 0.0
    for lower, points in steps:
        if reading.value > lower:
            return points
    return 0.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
