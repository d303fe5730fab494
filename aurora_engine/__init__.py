"""
Aurora Decision Engine.

Turns hourly geophysical and weather readings into a deterministic viewing
decision: a per-window Aurora Decision Score, the best and next viewing
windows, UI rendering directives, and a templated explanation.

Typical use::

    from aurora_engine import RawWindow, compute_decision

    decision = compute_decision(raw_windows)
    payload  = decision.to_json_dict()
"""

from aurora_engine.engine.pipeline import compute_decision
from aurora_engine.errors import AuroraEngineError, EmptyHorizon, InvalidWindow
from aurora_engine.models.decision import BestWindow, Decision, NextWindow, UIDirectives
from aurora_engine.models.window import RawWindow, ScoredWindow

__version__ = "0.1.0"

__all__ = [
    "AuroraEngineError",
    "BestWindow",
    "Decision",
    "EmptyHorizon",
    "InvalidWindow",
    "NextWindow",
    "RawWindow",
    "ScoredWindow",
    "UIDirectives",
    "compute_decision",
]
