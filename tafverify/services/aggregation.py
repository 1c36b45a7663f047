"""Statistics over a sequence of verification results."""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Optional, Sequence

from tafverify.models.verification import (
    AggregateSummary,
    ComparisonStatus,
    ContingencyStats,
    Rating,
    Trend,
    VerificationResult,
    VerificationStatus,
)
from tafverify.services.comparators import significant_weather

logger = logging.getLogger("tafverify.aggregation")

TREND_THRESHOLD = 5.0
POOR_SCORE = 50.0


def _mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def _ratio(numerator: int, denominator: int) -> Optional[float]:
    if denominator == 0:
        return None
    return round(numerator / denominator, 2)


def trend_for(scores: Sequence[float]) -> Trend:
    """Compare the last score with the first."""

    if len(scores) < 2:
        return Trend.STABLE
    delta = scores[-1] - scores[0]
    if delta > TREND_THRESHOLD:
        return Trend.IMPROVING
    if delta < -TREND_THRESHOLD:
        return Trend.DEGRADING
    return Trend.STABLE


def longest_run_below(scores: Sequence[float], threshold: float = POOR_SCORE) -> int:
    longest = current = 0
    for score in scores:
        current = current + 1 if score < threshold else 0
        longest = max(longest, current)
    return longest


def _wind_speed_rmse(results: Sequence[VerificationResult]) -> Optional[float]:
    squared: list[float] = []
    for result in results:
        forecast_wind = result.active_segment.wind if result.active_segment else None
        observed_wind = result.observation.wind
        if forecast_wind is None or observed_wind is None:
            continue
        if forecast_wind.speed is None or observed_wind.speed is None:
            continue
        squared.append((forecast_wind.speed - observed_wind.speed) ** 2)
    if not squared:
        return None
    return round(math.sqrt(sum(squared) / len(squared)), 2)


def _weather_contingency(results: Sequence[VerificationResult]) -> ContingencyStats:
    """Occurrence table of significant weather, forecast versus observed."""

    counts = Counter()
    for result in results:
        forecast_weather = bool(
            result.active_segment and significant_weather(result.active_segment.weather)
        )
        observed_weather = bool(significant_weather(result.observation.weather))
        if forecast_weather and observed_weather:
            counts["hits"] += 1
        elif forecast_weather:
            counts["false_alarms"] += 1
        elif observed_weather:
            counts["misses"] += 1
        else:
            counts["correct_negatives"] += 1

    hits, misses, false_alarms = counts["hits"], counts["misses"], counts["false_alarms"]
    return ContingencyStats(
        hits=hits,
        misses=misses,
        false_alarms=false_alarms,
        correct_negatives=counts["correct_negatives"],
        pod=_ratio(hits, hits + misses),
        far=_ratio(false_alarms, hits + false_alarms),
        csi=_ratio(hits, hits + misses + false_alarms),
    )


def summarize(results: Sequence[VerificationResult]) -> AggregateSummary:
    """Summarise results in the order given (usually chronological per station).

    Score statistics cover only results that had a forecast to verify against;
    the others are still counted.
    """

    verifiable = [result for result in results if result.has_forecast]
    if not verifiable:
        return AggregateSummary(count=len(results), verifiable_count=0)

    scores = [result.composite_score for result in verifiable]
    verified = sum(1 for result in verifiable if result.status == VerificationStatus.VERIFIED)

    parameter_scores: dict[str, list[float]] = {}
    visibility_hits = visibility_total = 0
    for result in verifiable:
        for comparison in result.comparisons:
            if comparison.status == ComparisonStatus.MISSING:
                continue
            parameter_scores.setdefault(comparison.parameter, []).append(comparison.score)
        if result.visibility is not None and result.visibility.category_match is not None:
            visibility_total += 1
            visibility_hits += int(result.visibility.category_match)

    bucket_scores: dict[str, list[float]] = {}
    for result in verifiable:
        if result.lead_time_bucket is not None:
            bucket_scores.setdefault(result.lead_time_bucket, []).append(result.composite_score)

    ratings = Counter(result.rating.value for result in verifiable)

    summary = AggregateSummary(
        count=len(results),
        verifiable_count=len(verifiable),
        mean_score=_mean(scores),
        verified_fraction=round(verified / len(verifiable), 3),
        trend=trend_for(scores),
        consistency=round(100.0 - (max(scores) - min(scores)), 1),
        longest_poor_run=longest_run_below(scores),
        parameter_means={name: _mean(values) for name, values in parameter_scores.items()},
        lead_time_means={name: _mean(values) for name, values in bucket_scores.items()},
        ratings={rating.value: ratings.get(rating.value, 0) for rating in Rating},
        wind_speed_rmse=_wind_speed_rmse(verifiable),
        visibility_category_hit_rate=_ratio(visibility_hits, visibility_total),
        weather=_weather_contingency(verifiable),
    )
    logger.debug(
        "Summarised %d results (%d verifiable): mean=%s trend=%s",
        summary.count,
        summary.verifiable_count,
        summary.mean_score,
        summary.trend.value,
    )
    return summary


__all__ = ["longest_run_below", "summarize", "trend_for"]
