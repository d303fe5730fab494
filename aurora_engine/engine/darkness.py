"""
Darkness gate and twilight bands.

Aurora is physically invisible while the sun is above the civil-twilight
boundary (-6°). ``is_dark_enough`` is the hard veto applied by the score
composer; ``twilight_phase`` and ``describe_darkness`` are display helpers.

Bands (sun elevation, degrees):
    > 0          day
    (-6, 0]      civil twilight
    (-12, -6]    nautical twilight
    (-18, -12]   astronomical twilight
    <= -18       night
"""

from __future__ import annotations

from typing import Optional

from aurora_engine.taxonomy.aurora_taxonomy import (
    ASTRONOMICAL_BOUNDARY_DEG,
    DARKNESS_MAX_ELEVATION_DEG,
    NAUTICAL_BOUNDARY_DEG,
    TwilightPhase,
)


def is_dark_enough(solar_elevation_degrees: float) -> bool:
    """True when the sun is at or below -6°, i.e. aurora can be seen."""
    return solar_elevation_degrees <= DARKNESS_MAX_ELEVATION_DEG


def twilight_phase(solar_elevation_degrees: float) -> TwilightPhase:
    if solar_elevation_degrees > 0:
        return TwilightPhase.DAY
    if solar_elevation_degrees > DARKNESS_MAX_ELEVATION_DEG:
        return TwilightPhase.CIVIL_TWILIGHT
    if solar_elevation_degrees > NAUTICAL_BOUNDARY_DEG:
        return TwilightPhase.NAUTICAL_TWILIGHT
    if solar_elevation_degrees > ASTRONOMICAL_BOUNDARY_DEG:
        return TwilightPhase.ASTRONOMICAL_TWILIGHT
    return TwilightPhase.NIGHT


def describe_darkness(solar_elevation_degrees: float) -> Optional[str]:
    """Explain why aurora cannot be seen, or ``None`` when it is dark enough."""
    if solar_elevation_degrees > 0:
        return "The sun is still above the horizon. Aurora is invisible during daylight."
    if not is_dark_enough(solar_elevation_degrees):
        return (
            "The sky is still too bright (civil twilight). "
            "Wait until full darkness for aurora visibility."
        )
    return None
