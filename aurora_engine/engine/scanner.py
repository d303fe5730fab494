"""
Window scanner: picks the best window over a horizon, diagnoses what limits
it, and finds the next viable window after it.

Usage flow
----------
1. scan_horizon(windows)
   -> HorizonScan(best_window, next_window)

Selection rules
---------------
- Best window = max ADS; ties → earliest timestamp. Ties compare timestamps,
  not list positions, so a shuffled-then-resorted horizon gives the same answer.
- With ``merge_adjacent=True`` the run of windows directly after the best one,
  each exactly one hour after its predecessor and sharing its ADS and
  classification, is merged into one BestWindow.
- next_window is only looked for when the best window is moderate or poor:
  the first window starting at or after BestWindow.end with ADS >= 30.

The input sequence is never reordered or mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from aurora_engine.engine.scorer import KP_WEIGHT
from aurora_engine.errors import EmptyHorizon
from aurora_engine.models.decision import BestWindow, NextWindow
from aurora_engine.models.window import ScoredWindow
from aurora_engine.taxonomy.aurora_taxonomy import (
    SATISFYING_CLASSIFICATIONS,
    VIABLE_MIN_ADS,
    LimitingFactor,
)
from aurora_engine.utils.time_utils import is_next_hour, window_end

# kp_score at or above this counts as "enough activity" (Kp ≈ 4.5).
STRONG_KP_SCORE = 30.0


@dataclass(frozen=True)
class HorizonScan:
    """Outcome of scanning one horizon.

    Attributes:
        best_window:  Best (possibly merged) window.
        next_window:  First viable window after the best, or ``None``.
        best_index:   Position of the best window's first member.
        merged_count: Number of windows merged into ``best_window`` (>= 1).
    """

    best_window:  BestWindow
    next_window:  Optional[NextWindow]
    best_index:   int
    merged_count: int


def scan_horizon(
    windows:        Sequence[ScoredWindow],
    merge_adjacent: bool = True,
) -> HorizonScan:
    """Select the best and next windows from an ordered horizon.

    Args:
        windows:        Scored windows in chronological order.
        merge_adjacent: Merge the contiguous run of equal windows that
                        follows the best one.

    Returns:
        :class:`HorizonScan`.

    Raises:
        EmptyHorizon: If ``windows`` is empty.
    """
    if not windows:
        raise EmptyHorizon("Cannot scan an empty horizon.")

    best_index = select_best_index(windows)
    best = windows[best_index]

    last_index = best_index
    if merge_adjacent:
        last_index = _merged_run_end(windows, best_index)

    best_window = BestWindow(
        start=best.timestamp,
        end=window_end(windows[last_index].timestamp),
        ads=best.ads,
        classification=best.classification,
        limiting_factor=diagnose_limiting_factor(best),
        probability_from_forecast=best.forecast_probability_percent,
    )

    next_window: Optional[NextWindow] = None
    if best.classification not in SATISFYING_CLASSIFICATIONS:
        next_window = find_next_window(windows, best_window.end)

    return HorizonScan(
        best_window=best_window,
        next_window=next_window,
        best_index=best_index,
        merged_count=last_index - best_index + 1,
    )


def select_best_index(windows: Sequence[ScoredWindow]) -> int:
    """Index of the window with the highest ADS; ties go to the earliest timestamp."""
    return min(
        range(len(windows)),
        key=lambda i: (-windows[i].ads, windows[i].timestamp),
    )


def diagnose_limiting_factor(window: ScoredWindow) -> LimitingFactor:
    """Identify what keeps ``window`` from scoring higher.

    Rules (evaluated in order; first match wins):
        1. too_bright : not dark enough (the veto outranks everything).
        2. cloud_cover: cloud penalty is the larger loss (non-zero and at
                        least the Kp shortfall, 60 − kp_score) while
                        activity is strong (kp_score >= 30).
        3. low_kp     : activity is weak (kp_score < 30) and the cloud
                        penalty is smaller than the Kp shortfall.
        4. mixed_conditions otherwise.
    """
    if not window.is_dark_enough:
        return LimitingFactor.TOO_BRIGHT

    components   = window.component_breakdown
    kp_score     = components.kp_score
    cloud        = components.cloud_penalty
    kp_shortfall = KP_WEIGHT - kp_score

    cloud_dominates = cloud > 0 and cloud >= kp_shortfall

    if cloud_dominates and kp_score >= STRONG_KP_SCORE:
        return LimitingFactor.CLOUD_COVER
    if kp_score < STRONG_KP_SCORE and cloud < kp_shortfall:
        return LimitingFactor.LOW_KP
    return LimitingFactor.MIXED_CONDITIONS


def find_next_window(
    windows:  Sequence[ScoredWindow],
    after:    datetime,
    min_ads:  int = VIABLE_MIN_ADS,
) -> Optional[NextWindow]:
    """First window starting at or after ``after`` whose ADS reaches ``min_ads``."""
    for w in windows:
        if w.timestamp >= after and w.ads >= min_ads:
            return NextWindow(timestamp=w.timestamp, ads=w.ads)
    return None


# ── Helpers ───────────────────────────────────────────────────────────────────

def _merged_run_end(windows: Sequence[ScoredWindow], start_index: int) -> int:
    """Index of the last window in the equal, hour-contiguous run from ``start_index``."""
    anchor = windows[start_index]
    last = start_index
    for i in range(start_index + 1, len(windows)):
        w = windows[i]
        if (
            w.ads != anchor.ads
            or w.classification is not anchor.classification
            or not is_next_hour(windows[last].timestamp, w.timestamp)
        ):
            break
        last = i
    return last
