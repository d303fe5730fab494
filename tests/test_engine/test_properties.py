"""
Property-based tests using Hypothesis for the scoring and decision engine.

These check invariants that must hold for every input the upstream feeds
could plausibly produce, including out-of-range readings.

Run with: pytest tests/test_engine/test_properties.py -v
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from aurora_engine.engine.normalizer import normalize_window
from aurora_engine.engine.pipeline import compute_decision
from aurora_engine.engine.scorer import score_window
from aurora_engine.models.window import RawWindow
from aurora_engine.taxonomy.aurora_taxonomy import Classification

_T0 = datetime(2025, 1, 10, 18, 0, tzinfo=timezone.utc)

_finite = dict(allow_nan=False, allow_infinity=False)

kp_values        = st.floats(min_value=-5.0, max_value=15.0, **_finite)
cloud_values     = st.floats(min_value=-50.0, max_value=200.0, **_finite)
elevation_values = st.floats(min_value=-90.0, max_value=90.0, **_finite)
bz_values        = st.none() | st.floats(min_value=-50.0, max_value=50.0, **_finite)
wind_values      = st.none() | st.floats(min_value=-200.0, max_value=2000.0, **_finite)
density_values   = st.none() | st.floats(min_value=-10.0, max_value=100.0, **_finite)


@st.composite
def raw_windows(draw, offset: int = 0) -> RawWindow:
    return RawWindow(
        timestamp=_T0 + timedelta(hours=offset),
        cloud_cover_percent=draw(cloud_values),
        solar_elevation_degrees=draw(elevation_values),
        planetary_k_index=draw(kp_values),
        bz_gsm_nano_tesla=draw(bz_values),
        solar_wind_speed_km_s=draw(wind_values),
        particle_density_per_cm3=draw(density_values),
    )


@st.composite
def horizons(draw, max_hours: int = 24) -> list[RawWindow]:
    hours = draw(st.integers(min_value=1, max_value=max_hours))
    return [draw(raw_windows(offset=i)) for i in range(hours)]


def _score(raw: RawWindow):
    return score_window(normalize_window(raw))


# ── Per-window properties ─────────────────────────────────────────────────────


class TestScoreProperties:
    @given(raw=raw_windows())
    def test_ads_in_range(self, raw):
        w = _score(raw)
        assert 0 <= w.ads <= 100
        assert isinstance(w.ads, int)

    @given(raw=raw_windows())
    def test_darkness_veto_holds(self, raw):
        w = _score(raw)
        if not w.is_dark_enough:
            assert w.ads == 0
            assert w.classification is Classification.POOR

    @given(raw=raw_windows(), extra_kp=st.floats(min_value=0.0, max_value=9.0, **_finite))
    def test_more_kp_never_lowers_ads(self, raw, extra_kp):
        higher = raw.model_copy(update={"planetary_k_index": raw.planetary_k_index + extra_kp})
        assert _score(higher).ads >= _score(raw).ads

    @given(raw=raw_windows(), extra_cloud=st.floats(min_value=0.0, max_value=100.0, **_finite))
    def test_more_cloud_never_raises_ads(self, raw, extra_cloud):
        cloudier = raw.model_copy(
            update={"cloud_cover_percent": raw.cloud_cover_percent + extra_cloud}
        )
        assert _score(cloudier).ads <= _score(raw).ads

    @given(raw=raw_windows())
    def test_scoring_is_deterministic(self, raw):
        assert _score(raw) == _score(raw)


# ── Horizon properties ────────────────────────────────────────────────────────


class TestDecisionProperties:
    @settings(max_examples=50, deadline=None)
    @given(raws=horizons())
    def test_best_window_has_max_ads(self, raws):
        d = compute_decision(raws, computed_at=_T0)
        top = max(w.ads for w in d.windows)
        assert d.best_window.ads == top
        first_top = next(w for w in d.windows if w.ads == top)
        assert d.best_window.start == first_top.timestamp

    @settings(max_examples=50, deadline=None)
    @given(raws=horizons())
    def test_decision_is_deterministic(self, raws):
        assert compute_decision(raws, computed_at=_T0) == compute_decision(raws, computed_at=_T0)

    @settings(max_examples=50, deadline=None)
    @given(raws=horizons())
    def test_windows_preserved(self, raws):
        d = compute_decision(raws, computed_at=_T0)
        assert len(d.windows) == len(raws)
        assert [w.timestamp for w in d.windows] == [r.timestamp for r in raws]

    @settings(max_examples=50, deadline=None)
    @given(raws=horizons())
    def test_next_window_after_best(self, raws):
        d = compute_decision(raws, computed_at=_T0)
        if d.next_window is not None:
            assert d.best_window.classification in (Classification.MODERATE, Classification.POOR)
            assert d.next_window.timestamp >= d.best_window.end
            assert d.next_window.ads >= 30

    @settings(max_examples=50, deadline=None)
    @given(raws=horizons())
    def test_directives_consistent(self, raws):
        d = compute_decision(raws, computed_at=_T0)
        top = max(w.ads for w in d.windows)
        ui = d.ui_directives
        assert 0 <= ui.highlight_top <= 3
        assert ui.show_48_grid == (top >= 20)
        if not ui.show_48_grid:
            assert ui.highlight_top == 0
            assert ui.show_best_banner is False

