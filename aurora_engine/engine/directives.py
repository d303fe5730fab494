"""
UI directive generation and the top-level forecast state.

The renderer reads :class:`UIDirectives` and draws; it never looks at ADS
values to decide what to show.

Directive rules (evaluated in order; first match wins):
    1. max ADS < 20            → no grid, no highlights, no banner
    2. any window ADS >= 50    → grid, highlight min(3, #good), banner if max >= 30
    3. 1–3 windows ADS >= 30   → grid, highlight 1, banner
    4. otherwise               → grid, highlight 1, banner if max >= 30
"""

from __future__ import annotations

from typing import Sequence

from aurora_engine.models.decision import UIDirectives
from aurora_engine.models.window import ScoredWindow
from aurora_engine.taxonomy.aurora_taxonomy import (
    GOOD_MIN_ADS,
    MAX_HIGHLIGHTED,
    SHOW_GRID_MIN_ADS,
    STATE_EXCELLENT_MIN_ADS,
    STATE_POSSIBLE_MIN_ADS,
    VIABLE_MIN_ADS,
    ForecastState,
)


def build_ui_directives(windows: Sequence[ScoredWindow]) -> UIDirectives:
    """Derive rendering directives from the scored horizon.

    An empty horizon renders nothing.
    """
    if not windows:
        return UIDirectives(show_48_grid=False, highlight_top=0, show_best_banner=False)

    max_ads      = max(w.ads for w in windows)
    good_count   = sum(1 for w in windows if w.ads >= GOOD_MIN_ADS)
    viable_count = sum(1 for w in windows if w.ads >= VIABLE_MIN_ADS)

    if max_ads < SHOW_GRID_MIN_ADS:
        return UIDirectives(show_48_grid=False, highlight_top=0, show_best_banner=False)

    if good_count > 0:
        return UIDirectives(
            show_48_grid=True,
            highlight_top=min(MAX_HIGHLIGHTED, good_count),
            show_best_banner=max_ads >= VIABLE_MIN_ADS,
        )

    if 0 < viable_count <= MAX_HIGHLIGHTED:
        return UIDirectives(show_48_grid=True, highlight_top=1, show_best_banner=True)

    return UIDirectives(
        show_48_grid=True,
        highlight_top=1,
        show_best_banner=max_ads >= VIABLE_MIN_ADS,
    )


def determine_state(best_ads: int) -> ForecastState:
    """Overall verdict from the best window's ADS: >=50 excellent, >=30 possible."""
    if best_ads >= STATE_EXCELLENT_MIN_ADS:
        return ForecastState.EXCELLENT
    if best_ads >= STATE_POSSIBLE_MIN_ADS:
        return ForecastState.POSSIBLE
    return ForecastState.UNLIKELY


def windows_to_highlight(
    windows:       Sequence[ScoredWindow],
    highlight_top: int,
) -> list[int]:
    """Indices of the ``highlight_top`` best windows, in horizon order.

    Windows are ranked by ADS descending; ties go to the earlier timestamp.
    The selected indices are returned sorted by position so the renderer can
    style them without ranking anything itself.
    """
    if highlight_top <= 0:
        return []
    ranked = sorted(
        range(len(windows)),
        key=lambda i: (-windows[i].ads, windows[i].timestamp),
    )
    return sorted(ranked[:highlight_top])
