"""Forecast verification: TAF selection, active segment resolution and scoring."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from tafverify.domain.timegroups import minutes_between, period_contains
from tafverify.models.fields import ConvectiveType, WindKind
from tafverify.models.reports import ForecastSegment, METARReport, SegmentKind, TAFReport
from tafverify.models.time import ReportTime
from tafverify.models.verification import (
    ActiveSegment,
    Anomaly,
    AnomalySeverity,
    ComparisonStatus,
    ParameterComparison,
    Rating,
    VerificationResult,
    VerificationStatus,
)
from tafverify.services.comparators import (
    compare_cloud,
    compare_visibility,
    compare_weather,
    compare_wind,
    is_severe_weather,
    significant_weather,
    with_transition_bonus,
)

logger = logging.getLogger("tafverify.verification")

PARAMETER_WEIGHTS: dict[str, float] = {
    "wind": 0.20,
    "visibility": 0.25,
    "cloud": 0.25,
    "weather": 0.20,
}
CATEGORY_AGREEMENT_BONUS = 10.0
TRANSITION_BONUS = 15.0
TEMPORARY_WEIGHT = 0.6
SEVERE_TEMPORARY_WEIGHT = 0.8
LOW_VISIBILITY_M = 1000

# Application order for windows containing the observation time; later kinds overwrite earlier ones
WINDOW_PRECEDENCE: dict[SegmentKind, int] = {
    SegmentKind.PROBABILITY: 1,
    SegmentKind.BECOMING: 2,
    SegmentKind.TEMPORARY: 3,
}

LEAD_TIME_BUCKETS: tuple[tuple[float, str], ...] = (
    (6, "0-6h"),
    (12, "6-12h"),
    (18, "12-18h"),
    (24, "18-24h"),
)
LEAD_TIME_TOP_BUCKET = "24h+"


def verification_status(score: float) -> VerificationStatus:
    """Status from the composite score alone."""

    if score >= 75:
        return VerificationStatus.VERIFIED
    if score >= 50:
        return VerificationStatus.PARTIAL
    return VerificationStatus.FAILED


def rating_for(score: float) -> Rating:
    if score >= 90:
        return Rating.EXCELLENT
    if score >= 75:
        return Rating.GOOD
    if score >= 50:
        return Rating.MODERATE
    return Rating.POOR


def lead_time_hours(observed_at: Optional[ReportTime], issued_at: Optional[ReportTime]) -> Optional[float]:
    """Observation time minus issue time in hours, month rollover applied."""

    if observed_at is None or issued_at is None:
        return None
    return round(minutes_between(issued_at, observed_at) / 60, 2)


def lead_time_bucket(hours: Optional[float]) -> Optional[str]:
    if hours is None or hours < 0:
        return None
    for upper, label in LEAD_TIME_BUCKETS:
        if hours < upper:
            return label
    return LEAD_TIME_TOP_BUCKET


def _hour_of(time: ReportTime) -> ReportTime:
    return ReportTime(day=time.day, hour=time.hour, minute=0)


def select_forecast(observation: METARReport, forecasts: Iterable[TAFReport]) -> Optional[TAFReport]:
    """Pick the most recently issued forecast for the station whose validity covers the observation.

    Ties keep the earliest forecast in input order.
    """

    if observation.station is None or observation.observed_at is None:
        return None

    observed_hour = _hour_of(observation.observed_at)
    candidates = [
        taf
        for taf in forecasts
        if taf.station == observation.station
        and taf.validity is not None
        and not taf.nil
        and not taf.cancelled
        and period_contains(taf.validity, observed_hour)
    ]
    if not candidates:
        return None

    def _age(taf: TAFReport) -> float:
        if taf.issued_at is None:
            return float("inf")
        return minutes_between(taf.issued_at, observation.observed_at)

    return min(candidates, key=_age)


def temporary_weight(segment: ForecastSegment) -> float:
    """Confidence weight of a TEMPO segment; higher when it carries severe weather."""

    return SEVERE_TEMPORARY_WEIGHT if is_severe_weather(segment.weather) else TEMPORARY_WEIGHT


def resolve_active_segment(taf: TAFReport, observed_at: ReportTime) -> ActiveSegment:
    """Forecast conditions in force at ``observed_at``.

    The base segment is overwritten by the latest FM group that has started.
    Every BECMG/TEMPO/PROB group whose window contains the observation time is
    then applied in turn (PROB, then BECMG, then TEMPO, text order within a
    kind), each overriding only the fields it reports.
    """

    segments = taf.segments
    wind, visibility = taf.base.wind, taf.base.visibility
    weather, clouds = taf.base.weather, taf.base.clouds
    applied = [0]

    for index, segment in enumerate(segments[1:], start=1):
        if segment.kind != SegmentKind.FROM or segment.time is None:
            continue
        if minutes_between(segment.time, observed_at) >= 0:
            wind, visibility = segment.wind, segment.visibility
            weather, clouds = segment.weather, segment.clouds
            applied.append(index)

    in_window = sorted(
        (
            (index, segment)
            for index, segment in enumerate(segments[1:], start=1)
            if segment.kind in WINDOW_PRECEDENCE
            and segment.window is not None
            and period_contains(segment.window, observed_at)
        ),
        key=lambda item: (WINDOW_PRECEDENCE[item[1].kind], item[0]),
    )
    in_transition = any(segment.kind == SegmentKind.BECOMING for _, segment in in_window)

    weight: Optional[float] = None
    for index, segment in in_window:
        if segment.wind is not None:
            wind = segment.wind
        if segment.visibility is not None:
            visibility = segment.visibility
        if segment.weather:
            weather = segment.weather
        if segment.clouds:
            clouds = segment.clouds
        applied.append(index)
        if segment.kind == SegmentKind.TEMPORARY:
            weight = temporary_weight(segment)

    last = applied[-1]
    return ActiveSegment(
        kind=segments[last].kind,
        index=last,
        applied=tuple(applied),
        in_transition=in_transition,
        temporary_weight=weight,
        wind=wind,
        visibility=visibility,
        weather=weather,
        clouds=clouds,
    )


def detect_anomalies(observation: METARReport, forecast: Optional[TAFReport]) -> list[Anomaly]:
    """Advisory data-quality checks on the observation and the selected forecast."""

    anomalies: list[Anomaly] = []

    if forecast is not None and forecast.station != observation.station:
        anomalies.append(
            Anomaly(
                code="STATION_MISMATCH",
                severity=AnomalySeverity.CRITICAL,
                message=f"Forecast for {forecast.station} paired with observation from {observation.station}",
            )
        )

    wind = observation.wind
    if wind is not None and wind.kind == WindKind.DIRECTIONAL and wind.speed == 0 and wind.direction:
        anomalies.append(
            Anomaly(
                code="CALM_WIND_WITH_DIRECTION",
                severity=AnomalySeverity.MEDIUM,
                message=f"Zero wind speed reported with direction {wind.direction:03d}",
            )
        )

    weather = significant_weather(observation.weather)
    has_thunderstorm = any("TS" in group.codes for group in weather)
    has_cb = any(layer.convective == ConvectiveType.CUMULONIMBUS for layer in observation.clouds)
    if has_thunderstorm and not has_cb:
        anomalies.append(
            Anomaly(
                code="THUNDERSTORM_WITHOUT_CB",
                severity=AnomalySeverity.MEDIUM,
                message="Thunderstorm reported without a cumulonimbus layer",
            )
        )

    if (
        observation.visibility is not None
        and observation.visibility.meters < LOW_VISIBILITY_M
        and not weather
    ):
        anomalies.append(
            Anomaly(
                code="LOW_VISIBILITY_WITHOUT_WEATHER",
                severity=AnomalySeverity.MEDIUM,
                message=f"Visibility {observation.visibility.meters} m with no weather phenomenon reported",
            )
        )

    return anomalies


class VerificationEngine:
    """Weighted, tolerance-based TAF verification.

    Parameter scores are combined with fixed weights; matching visibility and
    ceiling categories earn a flat bonus.
    """

    def __init__(
        self,
        weights: Optional[dict[str, float]] = None,
        category_bonus: float = CATEGORY_AGREEMENT_BONUS,
        transition_bonus: float = TRANSITION_BONUS,
    ) -> None:
        self.weights = dict(weights or PARAMETER_WEIGHTS)
        self.category_bonus = category_bonus
        self.transition_bonus = transition_bonus

    def composite_score(self, comparisons: Sequence[ParameterComparison]) -> float:
        """Weighted parameter score plus the category bonus, in [0, 100].

        Missing parameters are left out and the remaining weights rescaled so
        the weighted part keeps its full range.
        """

        total_weight = sum(self.weights.values())
        scored = [c for c in comparisons if c.status != ComparisonStatus.MISSING]
        if not scored:
            return 0.0
        used_weight = sum(self.weights[c.parameter] for c in scored)
        weighted = sum(self.weights[c.parameter] * c.score for c in scored)
        score = weighted / used_weight * total_weight

        by_parameter = {c.parameter: c for c in comparisons}
        visibility = by_parameter.get("visibility")
        cloud = by_parameter.get("cloud")
        if visibility and cloud and visibility.category_match and cloud.category_match:
            score += self.category_bonus
        return round(max(0.0, min(100.0, score)), 1)

    def _unverifiable(
        self,
        observation: METARReport,
        status: VerificationStatus,
        anomaly: Anomaly,
    ) -> VerificationResult:
        anomalies = [anomaly]
        if status == VerificationStatus.NO_VALID_FORECAST:
            anomalies.extend(detect_anomalies(observation, None))
        return VerificationResult(
            observation=observation,
            composite_score=0.0,
            rating=Rating.POOR,
            status=status,
            anomalies=tuple(anomalies),
        )

    def verify(self, observation: METARReport, forecasts: Iterable[TAFReport]) -> VerificationResult:
        """Verify one observation against the forecasts on hand."""

        if observation.station is None:
            return self._unverifiable(
                observation,
                VerificationStatus.UNPARSED,
                Anomaly(
                    code="UNPARSED_OBSERVATION",
                    severity=AnomalySeverity.HIGH,
                    message="Observation has no station group",
                ),
            )
        if observation.nil:
            return self._unverifiable(
                observation,
                VerificationStatus.UNPARSED,
                Anomaly(
                    code="NIL_OBSERVATION",
                    severity=AnomalySeverity.LOW,
                    message=f"NIL report from {observation.station}",
                ),
            )

        forecast = select_forecast(observation, forecasts)
        if forecast is None or observation.observed_at is None:
            logger.debug("No valid forecast for %s at %s", observation.station, observation.observed_at)
            return self._unverifiable(
                observation,
                VerificationStatus.NO_VALID_FORECAST,
                Anomaly(
                    code="NO_VALID_FORECAST",
                    severity=AnomalySeverity.HIGH,
                    message=f"No forecast for {observation.station} covers the observation time",
                ),
            )

        active = resolve_active_segment(forecast, observation.observed_at)
        wind = compare_wind(active.wind, observation.wind)
        visibility = compare_visibility(active.visibility, observation.visibility)
        weather = compare_weather(active.weather, observation.weather, active.temporary_weight)
        cloud = compare_cloud(active.clouds, observation.clouds)
        if active.in_transition:
            wind, visibility, weather, cloud = (
                with_transition_bonus(c, self.transition_bonus)
                for c in (wind, visibility, weather, cloud)
            )

        score = self.composite_score((wind, visibility, weather, cloud))
        lead = lead_time_hours(observation.observed_at, forecast.issued_at)
        result = VerificationResult(
            observation=observation,
            forecast=forecast,
            active_segment=active,
            wind=wind,
            visibility=visibility,
            weather=weather,
            cloud=cloud,
            composite_score=score,
            rating=rating_for(score),
            status=verification_status(score),
            lead_time_hours=lead,
            lead_time_bucket=lead_time_bucket(lead),
            anomalies=tuple(detect_anomalies(observation, forecast)),
        )
        logger.debug(
            "Verified %s %s against TAF issued %s: segment=%s score=%.1f status=%s",
            observation.station,
            observation.observed_at.label,
            forecast.issued_at.label if forecast.issued_at else None,
            active.kind.value,
            score,
            result.status.value,
        )
        return result

    def verify_all(
        self, observations: Iterable[METARReport], forecasts: Sequence[TAFReport]
    ) -> list[VerificationResult]:
        """Verify each observation independently, keeping input order."""

        return [self.verify(observation, forecasts) for observation in observations]


_default_engine = VerificationEngine()


def get_verification_engine() -> VerificationEngine:
    """Return the configured verification engine."""

    return _default_engine


def verify(observation: METARReport, forecasts: Iterable[TAFReport]) -> VerificationResult:
    """Convenience wrapper using the default engine."""

    return _default_engine.verify(observation, list(forecasts))


def verify_all(
    observations: Iterable[METARReport], forecasts: Iterable[TAFReport]
) -> list[VerificationResult]:
    return _default_engine.verify_all(observations, list(forecasts))


__all__ = [
    "VerificationEngine",
    "detect_anomalies",
    "get_verification_engine",
    "lead_time_bucket",
    "lead_time_hours",
    "rating_for",
    "resolve_active_segment",
    "select_forecast",
    "temporary_weight",
    "verification_status",
    "verify",
    "verify_all",
]
