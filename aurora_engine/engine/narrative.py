"""
Deterministic narrative for a decision.

Every explanation comes from a fixed template keyed by
(ForecastState, LimitingFactor). There is no free-text generation: the same
decision always yields the same sentence, and each sentence can be checked by
table lookup.

Placeholders
------------
    {time}    best window start, HH:MM in the window's own offset
    {ads}     best window ADS
    {travel}  optional travel note, e.g. " (45 min away)"
    {factor}  short limiting-factor phrase
    {hours}   horizon length, e.g. "48 hours" or "1 hour"
    {next}    next-window clause, e.g. "Next possible window: 21:00 (low confidence)."
"""

from __future__ import annotations

from typing import Optional

from aurora_engine.models.decision import BestWindow, NextWindow
from aurora_engine.taxonomy.aurora_taxonomy import ForecastState, LimitingFactor
from aurora_engine.utils.time_utils import format_clock

_EXCELLENT_BASE = (
    "Strong aurora conditions expected. "
    "Best viewing time: {time}{travel}. "
    "Confidence: {ads}/100."
)
_POSSIBLE_BASE = (
    "Limited aurora potential detected. "
    "Best window: {time}{travel}. "
    "Confidence: {ads}/100. "
    "Main limitation: {factor}."
)
_UNLIKELY_BASE = (
    "Aurora unlikely in the next {hours}. "
    "Limiting factor: {factor}. "
    "{next}"
)

EXPLANATION_TEMPLATES: dict[tuple[ForecastState, LimitingFactor], str] = {
    (ForecastState.EXCELLENT, LimitingFactor.CLOUD_COVER):
        _EXCELLENT_BASE + " Some cloud may drift through, so watch for clear gaps.",
    (ForecastState.EXCELLENT, LimitingFactor.LOW_KP):
        _EXCELLENT_BASE + " Solar wind is carrying the forecast; activity can fade quickly.",
    (ForecastState.EXCELLENT, LimitingFactor.TOO_BRIGHT):
        _EXCELLENT_BASE,
    (ForecastState.EXCELLENT, LimitingFactor.MIXED_CONDITIONS):
        _EXCELLENT_BASE,
    (ForecastState.POSSIBLE, LimitingFactor.CLOUD_COVER):
        _POSSIBLE_BASE + " Look for a spot with clearer skies.",
    (ForecastState.POSSIBLE, LimitingFactor.LOW_KP):
        _POSSIBLE_BASE + " Stronger geomagnetic activity is needed.",
    (ForecastState.POSSIBLE, LimitingFactor.TOO_BRIGHT):
        _POSSIBLE_BASE + " Wait for full darkness.",
    (ForecastState.POSSIBLE, LimitingFactor.MIXED_CONDITIONS):
        _POSSIBLE_BASE,
    (ForecastState.UNLIKELY, LimitingFactor.CLOUD_COVER):
        _UNLIKELY_BASE,
    (ForecastState.UNLIKELY, LimitingFactor.LOW_KP):
        _UNLIKELY_BASE,
    (ForecastState.UNLIKELY, LimitingFactor.TOO_BRIGHT):
        _UNLIKELY_BASE,
    (ForecastState.UNLIKELY, LimitingFactor.MIXED_CONDITIONS):
        _UNLIKELY_BASE,
}

_FACTOR_PHRASES: dict[LimitingFactor, str] = {
    LimitingFactor.CLOUD_COVER:      "too many clouds",
    LimitingFactor.LOW_KP:           "weak geomagnetic activity",
    LimitingFactor.TOO_BRIGHT:       "not dark enough",
    LimitingFactor.MIXED_CONDITIONS: "mixed conditions",
}

_FACTOR_ADVICE: dict[LimitingFactor, str] = {
    LimitingFactor.CLOUD_COVER:
        "Too many clouds are blocking the view. Clear skies are needed.",
    LimitingFactor.LOW_KP:
        "Geomagnetic activity is too weak. Stronger solar wind is needed.",
    LimitingFactor.TOO_BRIGHT:
        "The sky is not dark enough. Wait for it to get darker.",
    LimitingFactor.MIXED_CONDITIONS:
        "Multiple factors are preventing ideal conditions.",
}


def describe_limiting_factor(factor: LimitingFactor) -> str:
    """Short phrase for ``factor``, e.g. ``"too many clouds"``."""
    return _FACTOR_PHRASES[factor]


def limiting_factor_advice(factor: LimitingFactor) -> str:
    """One-sentence advice for ``factor``."""
    return _FACTOR_ADVICE[factor]


def generate_explanation(
    state:               ForecastState,
    best_window:         BestWindow,
    next_window:         Optional[NextWindow],
    horizon_hours:       int,
    travel_time_minutes: Optional[int] = None,
    origin:              Optional[str] = None,
) -> str:
    """Render the explanation for a decision.

    Args:
        state:               Overall forecast state.
        best_window:         Best window (start, ADS, limiting factor).
        next_window:         Next viable window, if any.
        horizon_hours:       Length of the scanned horizon.
        travel_time_minutes: Optional travel time to the viewing spot.
        origin:              Name of the travel origin, used when the
                             travel time is zero.

    Returns:
        Non-empty explanation string.
    """
    template = EXPLANATION_TEMPLATES[(state, best_window.limiting_factor)]

    if next_window is not None:
        next_clause = (
            f"Next possible window: {format_clock(next_window.timestamp)} (low confidence)."
        )
    else:
        next_clause = "No viable window in this horizon."

    travel = ""
    if travel_time_minutes is not None:
        travel = " " + format_travel_time(travel_time_minutes, origin)

    return template.format(
        time=format_clock(best_window.start),
        ads=best_window.ads,
        travel=travel,
        factor=describe_limiting_factor(best_window.limiting_factor),
        hours=f"{horizon_hours} hour" if horizon_hours == 1 else f"{horizon_hours} hours",
        next=next_clause,
    )


def format_travel_time(minutes: int, origin: Optional[str] = None) -> str:
    """Format a travel time as a parenthesised note.

    Examples: ``"(from Tromsø)"``, ``"(45 min away)"``, ``"(1h 30m away)"``,
    ``"(2h away)"``.
    """
    if minutes <= 0:
        return f"(from {origin})" if origin else "(no travel needed)"
    if minutes < 60:
        return f"({minutes} min away)"
    hours, mins = divmod(minutes, 60)
    return f"({hours}h {mins}m away)" if mins else f"({hours}h away)"
