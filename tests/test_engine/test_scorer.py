"""
Tests for aurora_engine/engine/scorer.py and aurora_engine/engine/darkness.py.

What we test
------------
compute_components():
  - Kp contributes (kp / 9) * 60.
  - Bz, wind and density step tables, including every boundary.
  - Absent signals contribute 0; a present zero reading does not.
  - Cloud penalty is (cloud / 100) * 50.

score_window():
  - Strong clear night scores excellent (92 for Kp 7, Bz -4, 650 km/s, 12/cm³, 10% cloud).
  - Raw sums above 100 clamp to 100; below 0 clamp to 0.
  - Darkness veto: sun above -6° → ads 0, poor, regardless of activity.
  - -6° exactly counts as dark.
  - Heavy cloud can wipe out moderate activity.

classify_ads() / round_half_up():
  - Tier boundaries at 70 / 50 / 30.
  - .5 rounds up, not to even.

darkness helpers:
  - twilight_phase bands.
  - describe_darkness returns None only when dark enough.
"""

from __future__ import annotations

import pytest

from aurora_engine.engine.darkness import describe_darkness, is_dark_enough, twilight_phase
from aurora_engine.engine.normalizer import normalize_window
from aurora_engine.engine.scorer import (
    classify_ads,
    compute_components,
    round_half_up,
    score_window,
)
from aurora_engine.taxonomy.aurora_taxonomy import Classification, TwilightPhase


def _components(make_raw, **kwargs):
    return compute_components(normalize_window(make_raw(**kwargs)))


def _score(make_raw, **kwargs):
    return score_window(normalize_window(make_raw(**kwargs)))


# ── Components ────────────────────────────────────────────────────────────────

class TestKpAndCloud:
    def test_kp_max_gives_60(self, make_raw):
        assert _components(make_raw, kp=9.0).kp_score == pytest.approx(60.0)

    def test_kp_linear(self, make_raw):
        assert _components(make_raw, kp=4.5).kp_score == pytest.approx(30.0)

    def test_cloud_penalty_full(self, make_raw):
        assert _components(make_raw, cloud=100.0).cloud_penalty == pytest.approx(50.0)

    def test_cloud_penalty_half(self, make_raw):
        assert _components(make_raw, cloud=50.0).cloud_penalty == pytest.approx(25.0)

    def test_raw_score_is_weighted_sum(self, make_raw):
        c = _components(
            make_raw, kp=7.0, cloud=10.0,
            bz_gsm_nano_tesla=-4.0, solar_wind_speed_km_s=650.0,
            particle_density_per_cm3=12.0,
        )
        expected = c.kp_score + c.bz_score + c.wind_score + c.density_score - c.cloud_penalty
        assert c.raw_score == pytest.approx(expected)


class TestBzSteps:
    @pytest.mark.parametrize(
        "bz, points",
        [
            (-10.0, 25.0),
            (-3.01, 25.0),
            (-3.0,  18.0),
            (-2.0,  18.0),
            (-1.5,  12.0),
            (-0.1,  12.0),
            (0.0,    5.0),
            (1.49,   5.0),
            (1.5,    0.0),
            (8.0,    0.0),
        ],
    )
    def test_bz_step_boundaries(self, make_raw, bz, points):
        assert _components(make_raw, bz_gsm_nano_tesla=bz).bz_score == points

    def test_absent_bz_scores_zero(self, make_raw):
        assert _components(make_raw).bz_score == 0.0

    def test_present_zero_bz_differs_from_absent(self, make_raw):
        present = _components(make_raw, bz_gsm_nano_tesla=0.0).bz_score
        absent  = _components(make_raw).bz_score
        assert present == 5.0
        assert absent == 0.0


class TestWindSteps:
    @pytest.mark.parametrize(
        "speed, points",
        [
            (800.0, 15.0),
            (600.1, 15.0),
            (600.0, 10.0),
            (450.1, 10.0),
            (450.0,  5.0),
            (350.1,  5.0),
            (350.0,  2.0),
            (300.1,  2.0),
            (300.0,  0.0),
            (0.0,    0.0),
        ],
    )
    def test_wind_step_boundaries(self, make_raw, speed, points):
        assert _components(make_raw, solar_wind_speed_km_s=speed).wind_score == points

    def test_absent_wind_scores_zero(self, make_raw):
        assert _components(make_raw).wind_score == 0.0

    def test_negative_wind_scores_zero(self, make_raw):
        assert _components(make_raw, solar_wind_speed_km_s=-100.0).wind_score == 0.0


class TestDensitySteps:
    @pytest.mark.parametrize(
        "density, points",
        [
            (25.0, 10.0),
            (10.1, 10.0),
            (10.0,  6.0),
            (5.1,   6.0),
            (5.0,   3.0),
            (2.1,   3.0),
            (2.0,   0.0),
            (0.0,   0.0),
        ],
    )
    def test_density_step_boundaries(self, make_raw, density, points):
        assert _components(make_raw, particle_density_per_cm3=density).density_score == points

    def test_absent_density_scores_zero(self, make_raw):
        assert _components(make_raw).density_score == 0.0


# ── score_window ──────────────────────────────────────────────────────────────

class TestScoreWindow:
    def test_strong_clear_night_is_excellent(self, make_raw):
        w = _score(
            make_raw, kp=7.0, cloud=10.0, elevation=-18.0,
            bz_gsm_nano_tesla=-4.0, solar_wind_speed_km_s=650.0,
            particle_density_per_cm3=12.0,
        )
        # 46.67 + 25 + 15 + 10 - 5 = 91.67
        # Not 100: DESIGN.md "Open Question decisions" records why the formula wins.
        assert w.ads == 92
        assert w.classification is Classification.EXCELLENT
        assert w.is_dark_enough is True

    def test_overflow_clamped_to_100(self, make_raw):
        w = _score(
            make_raw, kp=9.0, cloud=0.0,
            bz_gsm_nano_tesla=-10.0, solar_wind_speed_km_s=900.0,
            particle_density_per_cm3=50.0,
        )
        assert w.component_breakdown.raw_score == pytest.approx(110.0)
        assert w.ads == 100

    def test_negative_clamped_to_zero(self, make_raw):
        w = _score(make_raw, kp=0.0, cloud=100.0)
        assert w.component_breakdown.raw_score == pytest.approx(-50.0)
        assert w.ads == 0
        assert w.classification is Classification.POOR

    def test_heavy_cloud_wipes_out_activity(self, make_raw):
        w = _score(make_raw, kp=5.0, cloud=80.0, elevation=-10.0)
        assert w.ads == 0
        assert w.classification is Classification.POOR
        assert w.is_dark_enough is True

    def test_daylight_veto(self, make_raw):
        w = _score(
            make_raw, kp=9.0, cloud=0.0, elevation=5.0,
            bz_gsm_nano_tesla=-10.0, solar_wind_speed_km_s=900.0,
        )
        assert w.ads == 0
        assert w.classification is Classification.POOR
        assert w.is_dark_enough is False
        assert w.component_breakdown.raw_score > 0

    def test_civil_twilight_veto(self, make_raw):
        w = _score(make_raw, kp=9.0, elevation=-5.99)
        assert w.ads == 0
        assert w.is_dark_enough is False
        assert w.twilight_phase is TwilightPhase.CIVIL_TWILIGHT

    def test_minus_six_counts_as_dark(self, make_raw):
        w = _score(make_raw, kp=9.0, elevation=-6.0)
        assert w.is_dark_enough is True
        assert w.ads == 60

    def test_probability_carried_not_scored(self, make_raw):
        with_prob    = _score(make_raw, kp=6.0, forecast_probability_percent=80.0)
        without_prob = _score(make_raw, kp=6.0)
        assert with_prob.forecast_probability_percent == 80.0
        assert without_prob.forecast_probability_percent is None
        assert with_prob.ads == without_prob.ads

    def test_timestamp_carried(self, make_raw):
        raw = make_raw(3)
        assert score_window(normalize_window(raw)).timestamp == raw.timestamp


class TestClassification:
    @pytest.mark.parametrize(
        "ads, expected",
        [
            (100, Classification.EXCELLENT),
            (70,  Classification.EXCELLENT),
            (69,  Classification.GOOD),
            (50,  Classification.GOOD),
            (49,  Classification.MODERATE),
            (30,  Classification.MODERATE),
            (29,  Classification.POOR),
            (0,   Classification.POOR),
        ],
    )
    def test_tier_boundaries(self, ads, expected):
        assert classify_ads(ads) is expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3), (30.5, 31), (2.4999, 2), (0.0, 0), (99.5, 100), (45.6, 46)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected

    def test_differs_from_bankers_rounding(self):
        assert round(2.5) == 2
        assert round_half_up(2.5) == 3


# ── Darkness ──────────────────────────────────────────────────────────────────

class TestDarkness:
    @pytest.mark.parametrize(
        "elevation, dark",
        [(10.0, False), (0.0, False), (-5.9, False), (-6.0, True), (-30.0, True)],
    )
    def test_is_dark_enough(self, elevation, dark):
        assert is_dark_enough(elevation) is dark

    @pytest.mark.parametrize(
        "elevation, phase",
        [
            (12.0,  TwilightPhase.DAY),
            (0.0,   TwilightPhase.CIVIL_TWILIGHT),
            (-5.0,  TwilightPhase.CIVIL_TWILIGHT),
            (-6.0,  TwilightPhase.NAUTICAL_TWILIGHT),
            (-12.0, TwilightPhase.ASTRONOMICAL_TWILIGHT),
            (-17.0, TwilightPhase.ASTRONOMICAL_TWILIGHT),
            (-18.0, TwilightPhase.NIGHT),
            (-40.0, TwilightPhase.NIGHT),
        ],
    )
    def test_twilight_phase_bands(self, elevation, phase):
        assert twilight_phase(elevation) is phase

    def test_describe_darkness_daylight(self):
        assert "above the horizon" in describe_darkness(3.0)

    def test_describe_darkness_twilight(self):
        assert "too bright" in describe_darkness(-3.0)

    def test_describe_darkness_dark(self):
        assert describe_darkness(-6.0) is None
