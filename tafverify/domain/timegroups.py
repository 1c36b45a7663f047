"""Report time parsing and month-rollover arithmetic.

Reports carry only day-of-month, hour and minute. Comparisons between two such
times assume a synthetic 30-day month: when one time precedes its reference by
more than 15 days it is taken to belong to the following month.
"""

from __future__ import annotations

from typing import Optional

from tafverify.domain.lexicon import FM_TIME_RE, TIME_RE, VALIDITY_RE
from tafverify.models.time import MINUTES_PER_DAY, ReportTime, ValidityPeriod

MONTH_MINUTES = 30 * MINUTES_PER_DAY
ROLLOVER_THRESHOLD_MINUTES = 15 * MINUTES_PER_DAY

SHORT_TAF_HOURS = 9
LONG_TAF_HOURS = 30
DURATION_SNAP_HOURS = 5


def build_report_time(day: int, hour: int, minute: int = 0, *, allow_hour_24: bool = False) -> Optional[ReportTime]:
    """Return a ReportTime when the fields are in range, otherwise None."""

    max_hour = 24 if allow_hour_24 else 23
    if not 1 <= day <= 31 or not 0 <= hour <= max_hour or not 0 <= minute <= 59:
        return None
    if hour == 24 and minute:
        return None
    return ReportTime(day=day, hour=hour, minute=minute)


def parse_observation_time(token: str) -> Optional[ReportTime]:
    """Decode a ``ddhhmmZ`` group."""

    match = TIME_RE.match(token)
    if not match:
        return None
    return build_report_time(
        int(match.group("day")), int(match.group("hour")), int(match.group("minute"))
    )


def parse_day_hour(raw: str) -> Optional[ReportTime]:
    """Decode a 4-digit ``ddhh`` (or 6-digit ``ddhhmm``) change-group time."""

    match = FM_TIME_RE.match(raw)
    if not match:
        return None
    minute = int(match.group("minute")) if match.group("minute") else 0
    return build_report_time(
        int(match.group("day")), int(match.group("hour")), minute, allow_hour_24=True
    )


def parse_validity(token: str) -> Optional[ValidityPeriod]:
    """Decode a ``ddhh/ddhh`` validity group."""

    match = VALIDITY_RE.match(token)
    if not match:
        return None
    start = build_report_time(
        int(match.group("from_day")), int(match.group("from_hour")), allow_hour_24=True
    )
    end = build_report_time(
        int(match.group("to_day")), int(match.group("to_hour")), allow_hour_24=True
    )
    if start is None or end is None:
        return None
    return ValidityPeriod(start=start, end=end)


def unwrap_minutes(time: ReportTime, anchor: ReportTime) -> int:
    """Minutes of ``time`` placed on the same month line as ``anchor``.

    A time more than 15 days before the anchor is moved into the next month.
    """

    minutes = time.minutes
    if anchor.minutes - minutes > ROLLOVER_THRESHOLD_MINUTES:
        minutes += MONTH_MINUTES
    return minutes


def minutes_between(earlier: ReportTime, later: ReportTime) -> int:
    """Signed minutes from ``earlier`` to ``later`` with month rollover in both directions."""

    diff = later.minutes - earlier.minutes
    if diff < -ROLLOVER_THRESHOLD_MINUTES:
        diff += MONTH_MINUTES
    elif diff > ROLLOVER_THRESHOLD_MINUTES:
        diff -= MONTH_MINUTES
    return diff


def period_bounds(period: ValidityPeriod) -> tuple[int, int]:
    """Start and end minutes of a window, with the end moved past month end when needed."""

    start = period.start.minutes
    end = period.end.minutes
    if end < start:
        end += MONTH_MINUTES
    return start, end


def period_contains(period: ValidityPeriod, time: ReportTime) -> bool:
    """Whether ``time`` falls inside the inclusive window."""

    start, end = period_bounds(period)
    value = unwrap_minutes(time, period.start)
    return start <= value <= end


def validity_duration_hours(period: ValidityPeriod) -> int:
    """Length of a validity window in hours.

    When the window crosses a month end, the result snaps to the short (9 h)
    or long (30 h) TAF duration if it lies within 5 h of either, preferring
    the shorter interpretation.
    """

    start = period.start.day * 24 + period.start.hour
    end = period.end.day * 24 + period.end.hour
    diff = end - start
    if diff < 0:
        diff += 24 * 30
        if abs(diff - SHORT_TAF_HOURS) < DURATION_SNAP_HOURS:
            return SHORT_TAF_HOURS
        if abs(diff - LONG_TAF_HOURS) < DURATION_SNAP_HOURS:
            return LONG_TAF_HOURS
    return diff


__all__ = [
    "MONTH_MINUTES",
    "ROLLOVER_THRESHOLD_MINUTES",
    "build_report_time",
    "minutes_between",
    "parse_day_hour",
    "parse_observation_time",
    "parse_validity",
    "period_bounds",
    "period_contains",
    "unwrap_minutes",
    "validity_duration_hours",
]
