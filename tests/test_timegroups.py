from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.domain.timegroups import (
    minutes_between,
    parse_day_hour,
    parse_observation_time,
    parse_validity,
    period_contains,
    validity_duration_hours,
)
from tafverify.models.time import ReportTime


def test_parse_observation_time():
    time = parse_observation_time("111030Z")

    assert (time.day, time.hour, time.minute) == (11, 10, 30)
    assert time.label == "111030Z"


def test_out_of_range_times_are_rejected():
    assert parse_observation_time("321030Z") is None
    assert parse_observation_time("112430Z") is None
    assert parse_observation_time("111060Z") is None
    assert parse_validity("1106/1225") is None


def test_report_time_model_enforces_ranges():
    with pytest.raises(ValidationError):
        ReportTime(day=0, hour=10)


def test_validity_allows_hour_24():
    period = parse_validity("1206/1224")

    assert period.end.hour == 24
    assert validity_duration_hours(period) == 18


def test_fm_time_accepts_four_or_six_digits():
    assert parse_day_hour("1112") == ReportTime(day=11, hour=12)
    assert parse_day_hour("111230") == ReportTime(day=11, hour=12, minute=30)
    assert parse_day_hour("11") is None


def test_period_contains_across_month_end():
    period = parse_validity("2812/0112")

    assert period_contains(period, ReportTime(day=1, hour=6))
    assert period_contains(period, ReportTime(day=29, hour=0))
    assert not period_contains(period, ReportTime(day=1, hour=13))
    assert not period_contains(period, ReportTime(day=28, hour=11))


def test_period_contains_is_inclusive():
    period = parse_validity("1106/1212")

    assert period_contains(period, ReportTime(day=11, hour=6))
    assert period_contains(period, ReportTime(day=12, hour=12))
    assert not period_contains(period, ReportTime(day=12, hour=12, minute=30))


def test_minutes_between_applies_rollover_both_ways():
    assert minutes_between(ReportTime(day=11, hour=5), ReportTime(day=11, hour=10)) == 300
    assert minutes_between(ReportTime(day=30, hour=23), ReportTime(day=1, hour=1)) == 120
    assert minutes_between(ReportTime(day=1, hour=1), ReportTime(day=30, hour=23)) == -120


def test_validity_duration_snaps_month_crossing_windows():
    assert validity_duration_hours(parse_validity("1106/1212")) == 30
    assert validity_duration_hours(parse_validity("3018/0103")) == 9
    assert validity_duration_hours(parse_validity("3012/0118")) == 30
    assert validity_duration_hours(parse_validity("2812/0112")) == 72
