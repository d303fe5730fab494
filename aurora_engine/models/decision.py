"""
Horizon-level decision models.

``Decision`` is the root aggregate returned by one engine invocation. It is a
frozen snapshot: created fresh on every call, never mutated, and safe to
share between threads or cache by value.

``UIDirectives`` is pure derived data. Renderers read it and draw; they never
re-derive any decision logic from the windows.

``Decision.to_json_dict()`` produces the serving-layer wire shape: camelCase
keys, ISO-8601 time strings, integer scores, lowercase enum tags.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from aurora_engine.models.window import ScoredWindow
from aurora_engine.taxonomy.aurora_taxonomy import (
    ADS_MAX,
    ADS_MIN,
    MAX_HIGHLIGHTED,
    Classification,
    ForecastState,
    LimitingFactor,
)

_FROZEN_CAMEL = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class BestWindow(BaseModel):
    """The highest-scoring window (or merged run of equal windows).

    Attributes:
        start:                     Start of the first merged window.
        end:                       Exclusive end; last window start + 1 hour.
        ads:                       ADS shared by every merged window.
        classification:            Classification shared by every merged window.
        limiting_factor:           Dominant constraint on this window.
        probability_from_forecast: The first window's independent probability
                                   estimate, when the feed supplied one.
    """

    model_config = _FROZEN_CAMEL

    start: datetime
    end: datetime
    ads: int = Field(ge=ADS_MIN, le=ADS_MAX)
    classification: Classification
    limiting_factor: LimitingFactor
    probability_from_forecast: Optional[float] = None

    @model_validator(mode="after")
    def validate_span(self) -> "BestWindow":
        if self.end <= self.start:
            raise ValueError(f"end ({self.end}) must be after start ({self.start}).")
        return self


class NextWindow(BaseModel):
    """First viable window after the best window ends."""

    model_config = _FROZEN_CAMEL

    timestamp: datetime
    ads: int = Field(ge=ADS_MIN, le=ADS_MAX)


class UIDirectives(BaseModel):
    """Rendering instructions derived from the scored horizon.

    Attributes:
        show_48_grid:     Render the hourly grid at all.
        highlight_top:    How many top windows to highlight (0–3).
        show_best_banner: Render the "best viewing time" banner.
    """

    model_config = _FROZEN_CAMEL

    show_48_grid: bool = Field(alias="show48Grid")
    highlight_top: int = Field(ge=0, le=MAX_HIGHLIGHTED)
    show_best_banner: bool


class Decision(BaseModel):
    """Complete decision for one horizon.

    Attributes:
        state:         Overall verdict, evaluated on the best window.
        best_window:   Best viewing window.
        next_window:   Next viable window; only when the best is moderate/poor.
        windows:       Every scored window, in input order.
        ui_directives: Rendering instructions.
        explanation:   Deterministic narrative.
        computed_at:   When this decision was computed (not when data was).
    """

    model_config = _FROZEN_CAMEL

    state: ForecastState
    best_window: BestWindow
    next_window: Optional[NextWindow] = None
    windows: tuple[ScoredWindow, ...]
    ui_directives: UIDirectives
    explanation: str
    computed_at: datetime

    @model_validator(mode="after")
    def validate_decision_consistency(self) -> "Decision":
        if not self.windows:
            raise ValueError("A decision must contain at least one window.")
        if not self.explanation.strip():
            raise ValueError("explanation must not be empty.")
        return self

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON-compatible wire shape."""
        return self.model_dump(mode="json", by_alias=True)
