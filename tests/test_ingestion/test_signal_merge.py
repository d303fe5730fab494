"""
Tests for aurora_engine/ingestion/signal_merge.py.

Covers:
  - One raw window per hour when every feed is complete.
  - Kp carried forward across hours without a fresh reading,
    including from a reading before the horizon start.
  - Solar-wind values never carried forward.
  - Hours missing weather, or before any Kp, are skipped with a warning.
  - Probability estimates attached by hour.
  - Feed keys floored to the hour.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from aurora_engine.engine.pipeline import compute_decision
from aurora_engine.ingestion.signal_merge import (
    SpaceWeatherReading,
    WeatherReading,
    merge_signal_feeds,
)

T0 = datetime(2025, 1, 10, 18, 0, tzinfo=timezone.utc)


def hour(offset: int) -> datetime:
    return T0 + timedelta(hours=offset)


def _weather(hours: int) -> dict:
    return {hour(i): WeatherReading(cloud_cover_percent=10.0, solar_elevation_degrees=-20.0)
            for i in range(hours)}


class TestMergeSignalFeeds:
    def test_complete_feeds(self):
        space = {hour(i): SpaceWeatherReading(planetary_k_index=4.0, bz_gsm_nano_tesla=-2.0)
                 for i in range(3)}
        windows = merge_signal_feeds(T0, 3, _weather(3), space)
        assert [w.timestamp for w in windows] == [hour(0), hour(1), hour(2)]
        assert all(w.bz_gsm_nano_tesla == -2.0 for w in windows)

    def test_kp_carried_forward(self):
        space = {
            hour(0): SpaceWeatherReading(planetary_k_index=4.0, solar_wind_speed_km_s=500.0),
            hour(3): SpaceWeatherReading(planetary_k_index=6.0),
        }
        windows = merge_signal_feeds(T0, 5, _weather(5), space)
        assert [w.planetary_k_index for w in windows] == [4.0, 4.0, 4.0, 6.0, 6.0]

    def test_solar_wind_not_carried_forward(self):
        space = {hour(0): SpaceWeatherReading(planetary_k_index=4.0, solar_wind_speed_km_s=500.0)}
        windows = merge_signal_feeds(T0, 2, _weather(2), space)
        assert windows[0].solar_wind_speed_km_s == 500.0
        assert windows[1].solar_wind_speed_km_s is None

    def test_kp_from_before_start(self):
        space = {T0 - timedelta(hours=2): SpaceWeatherReading(planetary_k_index=5.0)}
        windows = merge_signal_feeds(T0, 2, _weather(2), space)
        assert [w.planetary_k_index for w in windows] == [5.0, 5.0]

    def test_hours_before_any_kp_skipped(self, caplog):
        space = {hour(1): SpaceWeatherReading(planetary_k_index=3.0)}
        with caplog.at_level(logging.WARNING, logger="aurora_engine.ingestion.signal_merge"):
            windows = merge_signal_feeds(T0, 3, _weather(3), space)
        assert [w.timestamp for w in windows] == [hour(1), hour(2)]
        assert "skipped 1 of 3" in caplog.text

    def test_hours_without_weather_skipped(self):
        weather = _weather(3)
        del weather[hour(1)]
        space = {hour(0): SpaceWeatherReading(planetary_k_index=3.0)}
        windows = merge_signal_feeds(T0, 3, weather, space)
        assert [w.timestamp for w in windows] == [hour(0), hour(2)]

    def test_probabilities_attached(self):
        space = {hour(0): SpaceWeatherReading(planetary_k_index=3.0)}
        windows = merge_signal_feeds(T0, 2, _weather(2), space, probabilities={hour(1): 25.0})
        assert windows[0].forecast_probability_percent is None
        assert windows[1].forecast_probability_percent == 25.0

    def test_keys_floored_to_hour(self):
        weather = {hour(0) + timedelta(minutes=20): WeatherReading(0.0, -20.0)}
        space = {hour(0) + timedelta(minutes=5): SpaceWeatherReading(planetary_k_index=7.0)}
        windows = merge_signal_feeds(T0 + timedelta(minutes=30), 1, weather, space)
        assert len(windows) == 1
        assert windows[0].timestamp == T0

    def test_merged_horizon_feeds_engine(self):
        space = {hour(0): SpaceWeatherReading(planetary_k_index=6.0)}
        decision = compute_decision(merge_signal_feeds(T0, 6, _weather(6), space))
        assert len(decision.windows) == 6
        assert decision.best_window.start == T0
