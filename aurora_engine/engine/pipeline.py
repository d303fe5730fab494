"""
compute_decision: the engine's single entry point.

Processing steps:
  1. Normalize every raw window (bad timestamps dropped or raised), then
     cap the horizon at ``max_windows`` valid windows.
  2. Score each normalized window.
  3. Scan the scored horizon for the best and next windows.
  4. Derive UI directives and the overall state.
  5. Render the deterministic explanation.

The function is pure apart from ``computed_at``, which defaults to the
current UTC time. Pass ``computed_at`` explicitly for byte-identical output
across calls. No I/O, no caching, no shared state: safe to call from many
threads at once.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from aurora_engine.engine.directives import build_ui_directives, determine_state
from aurora_engine.engine.narrative import generate_explanation
from aurora_engine.engine.normalizer import normalize_horizon
from aurora_engine.engine.scanner import scan_horizon
from aurora_engine.engine.scorer import score_window
from aurora_engine.errors import EmptyHorizon
from aurora_engine.models.decision import Decision
from aurora_engine.models.window import RawWindow
from aurora_engine.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def compute_decision(
    raws:                Iterable[RawWindow],
    computed_at:         Optional[datetime] = None,
    merge_adjacent:      bool = True,
    drop_invalid:        bool = True,
    travel_time_minutes: Optional[int] = None,
    origin:              Optional[str] = None,
    max_windows:         Optional[int] = None,
) -> Decision:
    """Turn a horizon of raw readings into a :class:`Decision`.

    Args:
        raws:                Raw windows in chronological order.
        computed_at:         Timestamp recorded on the decision; defaults to now.
        merge_adjacent:      Merge equal, hour-contiguous windows into the best window.
        drop_invalid:        Drop windows with bad timestamps instead of raising.
        travel_time_minutes: Optional travel time mentioned in the explanation.
        origin:              Travel origin name, used when travel time is zero.
        max_windows:         Keep at most this many valid windows. Counted
                             after invalid windows are dropped.

    Returns:
        Frozen :class:`Decision`.

    Raises:
        EmptyHorizon:  If no windows remain after normalization.
        InvalidWindow: If ``drop_invalid`` is ``False`` and a timestamp is bad.
    """
    normalized = normalize_horizon(raws, drop_invalid=drop_invalid)
    if max_windows is not None and len(normalized) > max_windows:
        logger.warning(
            "%d valid windows supplied; using the first %d.", len(normalized), max_windows,
        )
        normalized = normalized[:max_windows]
    if not normalized:
        raise EmptyHorizon()

    windows = [score_window(w) for w in normalized]
    scan = scan_horizon(windows, merge_adjacent=merge_adjacent)

    state = determine_state(scan.best_window.ads)
    directives = build_ui_directives(windows)
    explanation = generate_explanation(
        state=state,
        best_window=scan.best_window,
        next_window=scan.next_window,
        horizon_hours=len(windows),
        travel_time_minutes=travel_time_minutes,
        origin=origin,
    )

    decision = Decision(
        state=state,
        best_window=scan.best_window,
        next_window=scan.next_window,
        windows=tuple(windows),
        ui_directives=directives,
        explanation=explanation,
        computed_at=computed_at or utcnow(),
    )

    logger.info(
        "Decision: state=%s best=%s ads=%d factor=%s windows=%d",
        decision.state, decision.best_window.start.isoformat(),
        decision.best_window.ads, decision.best_window.limiting_factor,
        len(windows),
        extra={
            "state":           str(decision.state),
            "best_ads":        decision.best_window.ads,
            "limiting_factor": str(decision.best_window.limiting_factor),
            "window_count":    len(windows),
        },
    )
    return decision
