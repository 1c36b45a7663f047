"""Decoded METAR and TAF report models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tafverify.domain.stations import StationInfo
from tafverify.models.fields import CloudLayer, Visibility, WeatherPhenomenon, Wind, WindVariation
from tafverify.models.time import ReportTime, ValidityPeriod


class METARReport(BaseModel):
    """Routine (METAR) or special (SPECI) aerodrome observation."""

    model_config = ConfigDict(frozen=True)

    report_type: str = Field(default="METAR", description="METAR or SPECI")
    station: Optional[str] = Field(
        default=None, description="ICAO station; None means the decode failed"
    )
    station_info: Optional[StationInfo] = Field(default=None, description="Registry entry")
    observed_at: Optional[ReportTime] = Field(default=None, description="Observation time")
    wind: Optional[Wind] = Field(default=None, description="Surface wind")
    wind_variation: Optional[WindVariation] = Field(
        default=None, description="Variable direction extremes"
    )
    visibility: Optional[Visibility] = Field(default=None, description="Prevailing visibility")
    cavok: bool = Field(default=False, description="CAVOK reported")
    rvr: tuple[str, ...] = Field(default=(), description="Runway visual range groups, verbatim")
    weather: tuple[WeatherPhenomenon, ...] = Field(default=(), description="Present weather")
    clouds: tuple[CloudLayer, ...] = Field(default=(), description="Cloud groups")
    temperature_c: Optional[int] = Field(default=None, description="Air temperature")
    dewpoint_c: Optional[int] = Field(default=None, description="Dew point")
    qnh_hpa: Optional[int] = Field(default=None, description="QNH in hectopascals")
    corrected: bool = Field(default=False, description="COR marker present")
    automated: bool = Field(default=False, description="AUTO marker present")
    nil: bool = Field(default=False, description="NIL report (missing observation)")
    supplementary: tuple[str, ...] = Field(
        default=(), description="Tokens after the last recognised group"
    )
    raw: str = Field(..., description="Report text without the '=' terminator")


class SegmentKind(str, Enum):
    """TAF forecast segment variants."""

    BASE = "BASE"
    FROM = "FM"
    BECOMING = "BECMG"
    TEMPORARY = "TEMPO"
    PROBABILITY = "PROB"


class ForecastSegment(BaseModel):
    """Base forecast or one change group of a TAF."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind = Field(..., description="Segment variant")
    time: Optional[ReportTime] = Field(default=None, description="Start time of an FM segment")
    window: Optional[ValidityPeriod] = Field(
        default=None, description="Window of a BECMG, TEMPO or PROB segment"
    )
    probability: Optional[int] = Field(
        default=None, description="PROB percentage, or the PROB governing a TEMPO"
    )
    wind: Optional[Wind] = Field(default=None, description="Forecast wind")
    visibility: Optional[Visibility] = Field(default=None, description="Forecast visibility")
    weather: tuple[WeatherPhenomenon, ...] = Field(default=(), description="Forecast weather")
    clouds: tuple[CloudLayer, ...] = Field(default=(), description="Forecast cloud")
    raw: str = Field(default="", description="Tokens belonging to this segment")


class TafDuration(str, Enum):
    SHORT = "SHORT"
    LONG = "LONG"
    OTHER = "OTHER"


class TAFReport(BaseModel):
    """Terminal aerodrome forecast: base conditions plus ordered change groups."""

    model_config = ConfigDict(frozen=True)

    station: Optional[str] = Field(
        default=None, description="ICAO station; None means the decode failed"
    )
    station_info: Optional[StationInfo] = Field(default=None, description="Registry entry")
    issued_at: Optional[ReportTime] = Field(default=None, description="Issue time")
    validity: Optional[ValidityPeriod] = Field(default=None, description="Validity window")
    validity_hours: Optional[int] = Field(
        default=None, description="Validity length in hours, month rollover applied"
    )
    duration_class: TafDuration = Field(
        default=TafDuration.OTHER, description="Short (9 h) or long (30 h) TAF"
    )
    amendment: bool = Field(default=False, description="AMD marker present")
    correction: bool = Field(default=False, description="COR marker present")
    nil: bool = Field(default=False, description="NIL forecast")
    cancelled: bool = Field(default=False, description="CNL forecast")
    nosig: bool = Field(default=False, description="NOSIG marker present")
    base: ForecastSegment = Field(
        default_factory=lambda: ForecastSegment(kind=SegmentKind.BASE),
        description="Initial forecast conditions",
    )
    changes: tuple[ForecastSegment, ...] = Field(
        default=(), description="Change groups in textual order"
    )
    raw: str = Field(..., description="Report text without the '=' terminator")

    @property
    def segments(self) -> tuple[ForecastSegment, ...]:
        """Base segment followed by every change group."""

        return (self.base, *self.changes)


__all__ = [
    "ForecastSegment",
    "METARReport",
    "SegmentKind",
    "TafDuration",
    "TAFReport",
]
