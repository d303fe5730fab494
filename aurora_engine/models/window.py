"""
Per-window models: raw readings, normalized readings, and scored windows.

``RawWindow`` is what upstream feeds deliver: numeric readings that may be
out of range, optional signals that may be missing, and a timestamp that may
not parse. Construction never clamps or rejects out-of-range numbers; that is
the normalizer's job.

``NormalizedWindow`` carries clamped values and an explicit
:class:`SignalReading` for every optional signal, so "absent" is never
confused with a legitimate reading of zero.

``ScoredWindow`` is the per-window output of the score composer.

All models are frozen. JSON field names are camelCase (pydantic aliases);
Python attribute names are snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from aurora_engine.taxonomy.aurora_taxonomy import (
    ADS_MAX,
    ADS_MIN,
    Classification,
    SignalStatus,
    TwilightPhase,
)

_FROZEN_CAMEL = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class RawWindow(BaseModel):
    """One time slot of upstream readings, exactly as received.

    Attributes:
        timestamp:                    Window start; ISO-8601 string or datetime.
                                      Left unparsed until normalization.
        cloud_cover_percent:          Cloud cover, nominally 0–100.
        solar_elevation_degrees:      Signed sun elevation; no bound.
        planetary_k_index:            Planetary Kp, nominally 0–9.
        solar_wind_speed_km_s:        Optional solar-wind speed.
        bz_gsm_nano_tesla:            Optional IMF Bz (GSM); negative favours aurora.
        particle_density_per_cm3:     Optional solar-wind proton density.
        forecast_probability_percent: Optional independent probability estimate,
                                      carried for display only.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    timestamp: Any = None
    cloud_cover_percent: float
    solar_elevation_degrees: float
    planetary_k_index: float
    solar_wind_speed_km_s: Optional[float] = None
    bz_gsm_nano_tesla: Optional[float] = None
    particle_density_per_cm3: Optional[float] = None
    forecast_probability_percent: Optional[float] = None


class SignalReading(BaseModel):
    """An optional signal tagged explicitly as present or absent.

    Use :meth:`of` and :meth:`absent` rather than the constructor.
    """

    model_config = _FROZEN_CAMEL

    status: SignalStatus
    value: Optional[float] = None

    @model_validator(mode="after")
    def validate_status_matches_value(self) -> "SignalReading":
        if self.status is SignalStatus.PRESENT and self.value is None:
            raise ValueError("A present signal must carry a value.")
        if self.status is SignalStatus.ABSENT and self.value is not None:
            raise ValueError("An absent signal must not carry a value.")
        return self

    @classmethod
    def of(cls, value: float) -> "SignalReading":
        return cls(status=SignalStatus.PRESENT, value=float(value))

    @classmethod
    def absent(cls) -> "SignalReading":
        return cls(status=SignalStatus.ABSENT)

    @property
    def is_present(self) -> bool:
        return self.status is SignalStatus.PRESENT


class NormalizedWindow(BaseModel):
    """A raw window with every field clamped to its domain.

    Attributes:
        timestamp:                    Parsed, timezone-aware window start.
        cloud_cover_percent:          Clamped to [0, 100].
        solar_elevation_degrees:      Passed through unclamped.
        planetary_k_index:            Clamped to [0, 9].
        solar_wind_speed_km_s:        Absent when missing or negative.
        bz_gsm_nano_tesla:            Unclamped when present.
        particle_density_per_cm3:     Clamped to [0, +inf) when present.
        forecast_probability_percent: Clamped to [0, 100] when present.
    """

    model_config = _FROZEN_CAMEL

    timestamp: datetime
    cloud_cover_percent: float = Field(ge=0.0, le=100.0)
    solar_elevation_degrees: float
    planetary_k_index: float = Field(ge=0.0, le=9.0)
    solar_wind_speed_km_s: SignalReading = SignalReading.absent()
    bz_gsm_nano_tesla: SignalReading = SignalReading.absent()
    particle_density_per_cm3: SignalReading = SignalReading.absent()
    forecast_probability_percent: SignalReading = SignalReading.absent()


class ScoreComponents(BaseModel):
    """The weighted sub-scores behind one window's ADS.

    Retained for limiting-factor diagnosis and auditing, not for display.

    Attributes:
        kp_score:      0–60, (Kp / 9) * 60.
        bz_score:      0–25, stepped on Bz; 0 when Bz is absent.
        wind_score:    0–15, stepped on solar-wind speed; 0 when absent.
        density_score: 0–10, stepped on density; 0 when absent.
        cloud_penalty: 0–50, (cloud / 100) * 50. The only negative term.
        raw_score:     Unclamped weighted sum before the darkness veto.
    """

    model_config = _FROZEN_CAMEL

    kp_score:      float
    bz_score:      float
    wind_score:    float
    density_score: float
    cloud_penalty: float
    raw_score:     float


class ScoredWindow(BaseModel):
    """One window after scoring.

    Attributes:
        timestamp:                    Window start (aware).
        ads:                          Aurora Decision Score, integer 0–100.
        classification:               Tier of the post-veto ADS.
        is_dark_enough:               Sun at or below the civil-twilight boundary.
        component_breakdown:          Sub-scores behind the ADS.
        twilight_phase:               Sun-position band, for display.
        forecast_probability_percent: Independent probability estimate, if any.
    """

    model_config = _FROZEN_CAMEL

    timestamp: datetime
    ads: int = Field(ge=ADS_MIN, le=ADS_MAX)
    classification: Classification
    is_dark_enough: bool
    component_breakdown: ScoreComponents
    twilight_phase: TwilightPhase
    forecast_probability_percent: Optional[float] = None

    @model_validator(mode="after")
    def validate_darkness_veto(self) -> "ScoredWindow":
        if not self.is_dark_enough and (
            self.ads != 0 or self.classification is not Classification.POOR
        ):
            raise ValueError(
                "A window that is not dark enough must have ads=0 and "
                f"classification=poor, got ads={self.ads}, "
                f"classification={self.classification}."
            )
        return self
