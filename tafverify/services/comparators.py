"""Per-parameter forecast/observation comparators.

Every comparator takes the forecast value first and the observed value second
(either may be absent) and returns a ParameterComparison scored 0-100.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from tafverify.domain.categories import ceiling_category, visibility_category
from tafverify.models.fields import CloudLayer, Intensity, Visibility, WeatherPhenomenon, Wind, WindKind
from tafverify.models.verification import ComparisonStatus, ParameterComparison

# Wind tolerances
WIND_DIRECTION_TOLERANCE_DEG = 30
WIND_DIRECTION_PENALTY = 2.0
WIND_SPEED_TOLERANCE_KT = 5
WIND_SPEED_PENALTY = 5.0
WIND_GUST_TOLERANCE_KT = 7
WIND_GUST_PENALTY = 3.0

# Visibility tolerances
VISIBILITY_WIDE_TOLERANCE_M = 2000
VISIBILITY_NARROW_TOLERANCE_M = 1000
VISIBILITY_WIDE_THRESHOLD_M = 5000
VISIBILITY_PENALTY = 50.0

# Ceiling tolerances
CEILING_LOW_TOLERANCE_FT = 200
CEILING_HIGH_TOLERANCE_FT = 500
CEILING_LOW_THRESHOLD_FT = 1000
CEILING_PENALTY = 40.0

CATEGORY_MISMATCH_CAP = 50.0
CATEGORY_MATCH_FLOOR = 70.0
ONE_SIDED_CEILING_SCORE = 50.0

# Weather ranking, most severe first; the first three mark an unforecast event as a total miss
SEVERITY_PRIORITY: tuple[str, ...] = (
    "TS", "+RA", "DZ", "GR", "SQ", "FC", "+SN", "SN", "RA", "GS", "PL",
    "FG", "SS", "DS", "VA", "BR", "HZ", "DU", "SA", "FU",
)
CRITICAL_SEVERITY_COUNT = 3
SEVERE_TEMPORARY_CODES = frozenset({"TS", "+RA"})
UNFORECAST_WEATHER_SCORE = 50.0
FALSE_ALARM_SCORE = 30.0
FALSE_ALARM_TEMPORARY_BASE = 50.0
SEVERITY_DOWNGRADE_PENALTY = 30.0

MATCH_SCORE = 100.0
PARTIAL_THRESHOLD = 50.0


def _clamp(score: float) -> float:
    return round(max(0.0, min(100.0, score)), 1)


def _missing(parameter: str, detail: str = "Forecast or observation not reported") -> ParameterComparison:
    return ParameterComparison(
        parameter=parameter, score=0.0, status=ComparisonStatus.MISSING, detail=detail
    )


def _penalty_status(score: float) -> ComparisonStatus:
    if score >= MATCH_SCORE:
        return ComparisonStatus.MATCH
    if score >= PARTIAL_THRESHOLD:
        return ComparisonStatus.PARTIAL
    return ComparisonStatus.MISMATCH


def angular_difference(first: int, second: int) -> int:
    """Smallest angle between two directions, 0-180."""

    diff = abs(first - second) % 360
    return 360 - diff if diff > 180 else diff


def compare_wind(forecast: Optional[Wind], observed: Optional[Wind]) -> ParameterComparison:
    if forecast is None or observed is None:
        return _missing("wind")
    if WindKind.UNPARSED in (forecast.kind, observed.kind):
        return _missing("wind", "Wind group could not be decoded")

    if forecast.kind == WindKind.CALM and observed.kind == WindKind.CALM:
        return ParameterComparison(
            parameter="wind", score=100.0, status=ComparisonStatus.MATCH, detail="Calm forecast and observed"
        )

    speed_diff = abs((forecast.speed or 0) - (observed.speed or 0))
    speed_excess = max(0, speed_diff - WIND_SPEED_TOLERANCE_KT)

    if (
        forecast.kind != WindKind.DIRECTIONAL
        or observed.kind != WindKind.DIRECTIONAL
        or forecast.direction is None
        or observed.direction is None
    ):
        score = _clamp(100.0 - WIND_SPEED_PENALTY * speed_excess)
        return ParameterComparison(
            parameter="wind",
            score=score,
            status=_penalty_status(score),
            detail=f"Speed diff {speed_diff} kt (tolerance {WIND_SPEED_TOLERANCE_KT} kt); direction not compared",
        )

    angle = angular_difference(forecast.direction, observed.direction)
    angle_excess = max(0, angle - WIND_DIRECTION_TOLERANCE_DEG)
    gust_diff = 0
    if forecast.gust is not None or observed.gust is not None:
        gust_diff = abs(forecast.effective_speed - observed.effective_speed)
    gust_excess = max(0, gust_diff - WIND_GUST_TOLERANCE_KT)

    penalty = (
        WIND_DIRECTION_PENALTY * angle_excess
        + WIND_SPEED_PENALTY * speed_excess
        + WIND_GUST_PENALTY * gust_excess
    )
    score = _clamp(100.0 - penalty)
    detail = f"Direction diff {angle} deg, speed diff {speed_diff} kt"
    if gust_diff:
        detail += f", gust diff {gust_diff} kt"
    return ParameterComparison(
        parameter="wind", score=score, status=_penalty_status(score), detail=detail
    )


def _category_adjusted(
    parameter: str,
    score: float,
    within_tolerance: bool,
    forecast_category: str,
    observed_category: str,
    detail: str,
) -> ParameterComparison:
    """Cap the score on a category mismatch, floor it on a category match."""

    category_match = forecast_category == observed_category
    if category_match:
        score = max(score, CATEGORY_MATCH_FLOOR)
        status = ComparisonStatus.MATCH if within_tolerance else ComparisonStatus.PARTIAL
    else:
        score = min(score, CATEGORY_MISMATCH_CAP)
        status = ComparisonStatus.MISMATCH
    return ParameterComparison(
        parameter=parameter,
        score=_clamp(score),
        status=status,
        detail=f"{detail}; category {forecast_category} vs {observed_category}",
        forecast_category=forecast_category,
        observed_category=observed_category,
        category_match=category_match,
    )


def compare_visibility(forecast: Optional[Visibility], observed: Optional[Visibility]) -> ParameterComparison:
    if forecast is None or observed is None:
        return _missing("visibility")

    tolerance = (
        VISIBILITY_WIDE_TOLERANCE_M
        if forecast.meters >= VISIBILITY_WIDE_THRESHOLD_M
        else VISIBILITY_NARROW_TOLERANCE_M
    )
    diff = abs(forecast.meters - observed.meters)
    excess = max(0, diff - tolerance)
    score = 100.0 - VISIBILITY_PENALTY * (excess / tolerance)
    return _category_adjusted(
        "visibility",
        score,
        excess == 0,
        visibility_category(forecast.meters),
        visibility_category(observed.meters),
        f"Diff {diff} m (tolerance {tolerance} m)",
    )


def lowest_ceiling(clouds: Iterable[CloudLayer]) -> Optional[int]:
    """Height of the lowest broken or overcast layer, if any."""

    heights = [layer.height_ft for layer in clouds if layer.is_ceiling]
    return min(heights) if heights else None


def compare_cloud(forecast: Sequence[CloudLayer], observed: Sequence[CloudLayer]) -> ParameterComparison:
    forecast_ceiling = lowest_ceiling(forecast)
    observed_ceiling = lowest_ceiling(observed)
    forecast_category = ceiling_category(forecast_ceiling)
    observed_category = ceiling_category(observed_ceiling)

    if forecast_ceiling is None and observed_ceiling is None:
        return ParameterComparison(
            parameter="cloud",
            score=100.0,
            status=ComparisonStatus.MATCH,
            detail="No ceiling forecast or observed",
            forecast_category=forecast_category,
            observed_category=observed_category,
            category_match=True,
        )
    if forecast_ceiling is None or observed_ceiling is None:
        side = "observed" if forecast_ceiling is None else "forecast"
        return ParameterComparison(
            parameter="cloud",
            score=ONE_SIDED_CEILING_SCORE,
            status=ComparisonStatus.PARTIAL,
            detail=f"Ceiling only {side}",
            forecast_category=forecast_category,
            observed_category=observed_category,
            category_match=False,
        )

    tolerance = (
        CEILING_LOW_TOLERANCE_FT
        if forecast_ceiling <= CEILING_LOW_THRESHOLD_FT
        else CEILING_HIGH_TOLERANCE_FT
    )
    diff = abs(forecast_ceiling - observed_ceiling)
    excess = max(0, diff - tolerance)
    score = 100.0 - CEILING_PENALTY * (excess / tolerance)
    return _category_adjusted(
        "cloud",
        score,
        excess == 0,
        forecast_category,
        observed_category,
        f"Ceiling {forecast_ceiling} ft vs {observed_ceiling} ft (tolerance {tolerance} ft)",
    )


def significant_weather(groups: Iterable[WeatherPhenomenon]) -> list[WeatherPhenomenon]:
    """Weather groups other than the NSW sentinel."""

    return [group for group in groups if not group.no_significant_weather]


def severity_keys(groups: Iterable[WeatherPhenomenon]) -> set[str]:
    """Ranking keys present in the groups (``TS``, ``+RA`` and plain phenomenon codes)."""

    keys: set[str] = set()
    for group in groups:
        keys |= group.codes
        if group.intensity == Intensity.HEAVY:
            keys |= {f"+{code}" for code in group.phenomena}
    return keys


def severity_rank(groups: Iterable[WeatherPhenomenon]) -> Optional[int]:
    """Index of the most severe ranked key, lower being more severe."""

    keys = severity_keys(groups)
    ranks = [index for index, key in enumerate(SEVERITY_PRIORITY) if key in keys]
    return min(ranks) if ranks else None


def is_severe_weather(groups: Iterable[WeatherPhenomenon]) -> bool:
    return bool(severity_keys(groups) & SEVERE_TEMPORARY_CODES)


def _codes(groups: Iterable[WeatherPhenomenon]) -> set[str]:
    codes: set[str] = set()
    for group in groups:
        codes |= group.codes
    return codes


def compare_weather(
    forecast: Sequence[WeatherPhenomenon],
    observed: Sequence[WeatherPhenomenon],
    temporary_weight: Optional[float] = None,
) -> ParameterComparison:
    forecast_groups = significant_weather(forecast)
    observed_groups = significant_weather(observed)

    if not forecast_groups and not observed_groups:
        return ParameterComparison(
            parameter="weather", score=100.0, status=ComparisonStatus.MATCH, detail="No significant weather"
        )

    if not forecast_groups:
        rank = severity_rank(observed_groups)
        critical = rank is not None and rank < CRITICAL_SEVERITY_COUNT
        score = 0.0 if critical else UNFORECAST_WEATHER_SCORE
        return ParameterComparison(
            parameter="weather",
            score=score,
            status=ComparisonStatus.MISMATCH,
            detail="Weather observed but not forecast" + (" (severe)" if critical else ""),
        )

    if not observed_groups:
        score = (
            FALSE_ALARM_TEMPORARY_BASE * temporary_weight
            if temporary_weight is not None
            else FALSE_ALARM_SCORE
        )
        return ParameterComparison(
            parameter="weather",
            score=_clamp(score),
            status=ComparisonStatus.MISMATCH,
            detail="Weather forecast but not observed",
        )

    forecast_codes = _codes(forecast_groups)
    observed_codes = _codes(observed_groups)
    overlap = len(forecast_codes & observed_codes) / len(forecast_codes | observed_codes)
    score = 100.0 * overlap
    detail = f"Overlap {overlap:.0%} of {sorted(forecast_codes | observed_codes)}"

    forecast_rank = severity_rank(forecast_groups)
    observed_rank = severity_rank(observed_groups)
    if forecast_rank is not None and (observed_rank is None or observed_rank > forecast_rank):
        score -= SEVERITY_DOWNGRADE_PENALTY
        detail += "; observed less severe than forecast"
    if temporary_weight is not None:
        score *= temporary_weight
        detail += f"; TEMPO weight {temporary_weight}"

    score = _clamp(score)
    if overlap == 1.0 and score >= MATCH_SCORE:
        status = ComparisonStatus.MATCH
    elif overlap > 0:
        status = ComparisonStatus.PARTIAL
    else:
        status = ComparisonStatus.MISMATCH
    return ParameterComparison(parameter="weather", score=score, status=status, detail=detail)


def with_transition_bonus(comparison: ParameterComparison, bonus: float) -> ParameterComparison:
    """Raise a score by a flat bonus (capped at 100); missing comparisons are left alone."""

    if comparison.status == ComparisonStatus.MISSING:
        return comparison
    score = _clamp(comparison.score + bonus)
    status = comparison.status
    if score >= MATCH_SCORE and status == ComparisonStatus.PARTIAL:
        status = ComparisonStatus.MATCH
    return comparison.model_copy(
        update={"score": score, "status": status, "detail": f"{comparison.detail}; BECMG transition +{bonus:g}"}
    )


__all__ = [
    "SEVERITY_PRIORITY",
    "angular_difference",
    "compare_cloud",
    "compare_visibility",
    "compare_weather",
    "compare_wind",
    "is_severe_weather",
    "lowest_ceiling",
    "severity_rank",
    "with_transition_bonus",
]
