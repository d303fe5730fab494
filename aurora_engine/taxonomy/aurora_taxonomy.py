"""
Closed vocabularies and thresholds for the aurora decision engine.

Every tag the engine emits is defined exactly once here and shared by the
score composer, the window scanner, and the directive generator:

  - ``Classification`` : per-window tier derived from the ADS.
  - ``LimitingFactor`` : dominant cause suppressing the best window.
  - ``ForecastState``  : top-level verdict for the whole horizon.
  - ``TwilightPhase``  : sun-position band, for display only.
  - ``SignalStatus``   : present/absent tag for optional upstream signals.

Threshold constants are also defined once so the classification bands and
the forecast-state bands cannot drift apart.

This module has NO imports from any other ``aurora_engine`` package.
"""

from enum import StrEnum


class Classification(StrEnum):
    """Tier of a single window's Aurora Decision Score."""

    EXCELLENT = "excellent"
    """ADS >= 70."""

    GOOD = "good"
    """ADS >= 50."""

    MODERATE = "moderate"
    """ADS >= 30."""

    POOR = "poor"
    """Everything else, and every window vetoed by darkness."""


class LimitingFactor(StrEnum):
    """Primary constraint keeping the best window from scoring higher."""

    CLOUD_COVER = "cloud_cover"
    LOW_KP = "low_kp"
    TOO_BRIGHT = "too_bright"
    MIXED_CONDITIONS = "mixed_conditions"


class ForecastState(StrEnum):
    """Overall verdict, evaluated once on the best window."""

    EXCELLENT = "excellent"
    POSSIBLE = "possible"
    UNLIKELY = "unlikely"


class TwilightPhase(StrEnum):
    """Sun-position band, from highest to lowest solar elevation."""

    DAY = "day"
    CIVIL_TWILIGHT = "civil_twilight"
    NAUTICAL_TWILIGHT = "nautical_twilight"
    ASTRONOMICAL_TWILIGHT = "astronomical_twilight"
    NIGHT = "night"


class SignalStatus(StrEnum):
    """Whether an optional upstream signal was supplied for a window."""

    PRESENT = "present"
    ABSENT = "absent"


# ── Score bounds ──────────────────────────────────────────────────────────────

ADS_MIN = 0
ADS_MAX = 100

# ── Classification bands (applied to post-veto ADS) ───────────────────────────

EXCELLENT_MIN_ADS = 70
GOOD_MIN_ADS = 50
MODERATE_MIN_ADS = 30

# A window is "viable" when it would be classified at least moderate.
VIABLE_MIN_ADS = MODERATE_MIN_ADS

# ── Forecast-state bands (evaluated on the best window only) ──────────────────

STATE_EXCELLENT_MIN_ADS = GOOD_MIN_ADS
STATE_POSSIBLE_MIN_ADS = MODERATE_MIN_ADS

# ── UI directive bands ────────────────────────────────────────────────────────

SHOW_GRID_MIN_ADS = 20
MAX_HIGHLIGHTED = 3

# ── Darkness ──────────────────────────────────────────────────────────────────

# Civil-twilight boundary; aurora is invisible with the sun above it.
DARKNESS_MAX_ELEVATION_DEG = -6.0

NAUTICAL_BOUNDARY_DEG = -12.0
ASTRONOMICAL_BOUNDARY_DEG = -18.0

# ── Signal domains ────────────────────────────────────────────────────────────

KP_MIN = 0.0
KP_MAX = 9.0
CLOUD_MIN_PCT = 0.0
CLOUD_MAX_PCT = 100.0
PROBABILITY_MIN_PCT = 0.0
PROBABILITY_MAX_PCT = 100.0

# Tiers that need no "next window" suggestion.
SATISFYING_CLASSIFICATIONS: frozenset[Classification] = frozenset({
    Classification.EXCELLENT,
    Classification.GOOD,
})
