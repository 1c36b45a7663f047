"""Verification result and aggregate summary models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tafverify.models.fields import CloudLayer, Visibility, WeatherPhenomenon, Wind
from tafverify.models.reports import METARReport, SegmentKind, TAFReport


class ComparisonStatus(str, Enum):
    MATCH = "MATCH"
    PARTIAL = "PARTIAL"
    MISMATCH = "MISMATCH"
    MISSING = "MISSING"


class VerificationStatus(str, Enum):
    VERIFIED = "VERIFIED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"
    NO_VALID_FORECAST = "NO_VALID_FORECAST"
    UNPARSED = "UNPARSED"


class Rating(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    MODERATE = "MODERATE"
    POOR = "POOR"


class AnomalySeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Trend(str, Enum):
    IMPROVING = "IMPROVING"
    DEGRADING = "DEGRADING"
    STABLE = "STABLE"


class ParameterComparison(BaseModel):
    """Outcome of comparing one forecast parameter with its observation."""

    model_config = ConfigDict(frozen=True)

    parameter: str = Field(..., description="wind, visibility, cloud or weather")
    score: float = Field(..., ge=0, le=100, description="Agreement score")
    status: ComparisonStatus = Field(..., description="Qualitative agreement")
    detail: str = Field(default="", description="Human-readable explanation")
    forecast_category: Optional[str] = Field(default=None, description="Forecast flight category")
    observed_category: Optional[str] = Field(default=None, description="Observed flight category")
    category_match: Optional[bool] = Field(
        default=None, description="Whether both values fall in the same category"
    )


class ActiveSegment(BaseModel):
    """Forecast conditions resolved for the observation time."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind = Field(..., description="Kind of the segment applied last")
    index: int = Field(..., description="Position in TAFReport.segments of that segment")
    applied: tuple[int, ...] = Field(
        default=(0,), description="Segment positions applied, in order"
    )
    in_transition: bool = Field(default=False, description="Inside a BECMG window")
    temporary_weight: Optional[float] = Field(
        default=None, description="Confidence weight of an applied TEMPO segment"
    )
    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    weather: tuple[WeatherPhenomenon, ...] = ()
    clouds: tuple[CloudLayer, ...] = ()


class Anomaly(BaseModel):
    """Advisory data-quality finding; never affects the score."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Stable machine-readable identifier")
    severity: AnomalySeverity = Field(..., description="Severity")
    message: str = Field(..., description="Description")


class VerificationResult(BaseModel):
    """Verification of one observation against a set of forecasts."""

    model_config = ConfigDict(frozen=True)

    observation: METARReport = Field(..., description="Verified observation")
    forecast: Optional[TAFReport] = Field(default=None, description="Selected forecast")
    active_segment: Optional[ActiveSegment] = Field(
        default=None, description="Forecast conditions applied"
    )
    wind: Optional[ParameterComparison] = None
    visibility: Optional[ParameterComparison] = None
    weather: Optional[ParameterComparison] = None
    cloud: Optional[ParameterComparison] = None
    composite_score: float = Field(..., ge=0, le=100, description="Weighted score")
    rating: Rating = Field(..., description="Qualitative rating")
    status: VerificationStatus = Field(..., description="Verification status")
    lead_time_hours: Optional[float] = Field(
        default=None, description="Observation time minus issue time, in hours"
    )
    lead_time_bucket: Optional[str] = Field(default=None, description="Lead-time range label")
    anomalies: tuple[Anomaly, ...] = Field(default=(), description="Advisory findings")

    @property
    def comparisons(self) -> tuple[ParameterComparison, ...]:
        return tuple(
            c for c in (self.wind, self.visibility, self.weather, self.cloud) if c is not None
        )

    @property
    def has_forecast(self) -> bool:
        return self.forecast is not None


class ContingencyStats(BaseModel):
    """Occurrence contingency for weather phenomena."""

    model_config = ConfigDict(frozen=True)

    hits: int = 0
    misses: int = 0
    false_alarms: int = 0
    correct_negatives: int = 0
    pod: Optional[float] = Field(default=None, description="Probability of detection")
    far: Optional[float] = Field(default=None, description="False alarm ratio")
    csi: Optional[float] = Field(default=None, description="Critical success index")


class AggregateSummary(BaseModel):
    """Statistics over a sequence of verification results."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., description="Results supplied")
    verifiable_count: int = Field(..., description="Results with a selected forecast")
    mean_score: Optional[float] = Field(default=None, description="Mean composite score")
    verified_fraction: Optional[float] = Field(
        default=None, description="Fraction with status VERIFIED"
    )
    trend: Trend = Field(default=Trend.STABLE, description="First-versus-last score trend")
    consistency: Optional[float] = Field(default=None, description="100 - (max - min)")
    longest_poor_run: int = Field(default=0, description="Longest run of scores below 50")
    parameter_means: dict[str, float] = Field(
        default_factory=dict, description="Mean score per parameter"
    )
    lead_time_means: dict[str, float] = Field(
        default_factory=dict, description="Mean composite score per lead-time bucket"
    )
    ratings: dict[str, int] = Field(default_factory=dict, description="Rating distribution")
    wind_speed_rmse: Optional[float] = Field(
        default=None, description="RMSE of forecast versus observed wind speed (kt)"
    )
    visibility_category_hit_rate: Optional[float] = Field(
        default=None, description="Fraction of visibility comparisons in the same category"
    )
    weather: ContingencyStats = Field(default_factory=ContingencyStats)


__all__ = [
    "ActiveSegment",
    "AggregateSummary",
    "Anomaly",
    "AnomalySeverity",
    "ComparisonStatus",
    "ContingencyStats",
    "ParameterComparison",
    "Rating",
    "Trend",
    "VerificationResult",
    "VerificationStatus",
]
