"""Pydantic models for decoded reports and verification results."""

from .api import (
    BulletinRequest,
    DecodedBulletin,
    DecodeRequest,
    TokenClassification,
    VerifyRequest,
    VerifyResponse,
)
from .fields import (
    CloudKind,
    CloudLayer,
    ConvectiveType,
    Coverage,
    Intensity,
    Visibility,
    WeatherPhenomenon,
    Wind,
    WindKind,
    WindVariation,
)
from .reports import ForecastSegment, METARReport, SegmentKind, TafDuration, TAFReport
from .time import ReportTime, ValidityPeriod
from .verification import (
    ActiveSegment,
    AggregateSummary,
    Anomaly,
    AnomalySeverity,
    ComparisonStatus,
    ContingencyStats,
    ParameterComparison,
    Rating,
    Trend,
    VerificationResult,
    VerificationStatus,
)

__all__ = [
    "ActiveSegment",
    "AggregateSummary",
    "Anomaly",
    "AnomalySeverity",
    "BulletinRequest",
    "CloudKind",
    "CloudLayer",
    "ComparisonStatus",
    "ContingencyStats",
    "ConvectiveType",
    "Coverage",
    "DecodedBulletin",
    "DecodeRequest",
    "ForecastSegment",
    "Intensity",
    "METARReport",
    "ParameterComparison",
    "Rating",
    "ReportTime",
    "SegmentKind",
    "TafDuration",
    "TAFReport",
    "TokenClassification",
    "Trend",
    "ValidityPeriod",
    "VerificationResult",
    "VerificationStatus",
    "VerifyRequest",
    "VerifyResponse",
    "Visibility",
    "WeatherPhenomenon",
    "Wind",
    "WindKind",
    "WindVariation",
]
