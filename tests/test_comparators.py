from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.models.fields import Visibility
from tafverify.models.verification import ComparisonStatus
from tafverify.services.comparators import (
    angular_difference,
    compare_cloud,
    compare_visibility,
    compare_weather,
    compare_wind,
    is_severe_weather,
    with_transition_bonus,
)
from tafverify.services.field_decoders import decode_cloud, decode_weather, decode_wind


def _clouds(*tokens):
    return [decode_cloud(token) for token in tokens]


def _weather(*tokens):
    return [decode_weather(token) for token in tokens]


def test_angular_difference_wraps():
    assert angular_difference(350, 10) == 20
    assert angular_difference(10, 350) == 20
    assert angular_difference(90, 270) == 180


def test_wind_within_tolerance_matches():
    result = compare_wind(decode_wind("19008KT"), decode_wind("20010KT"))

    assert result.score == 100
    assert result.status == ComparisonStatus.MATCH


def test_wind_penalties_beyond_tolerance():
    result = compare_wind(decode_wind("18010KT"), decode_wind("23020KT"))

    # 50 deg (20 over) and 10 kt (5 over)
    assert result.score == 100 - 2 * 20 - 5 * 5
    assert result.status == ComparisonStatus.MISMATCH


def test_wind_gust_penalty():
    result = compare_wind(decode_wind("18010KT"), decode_wind("18012G30KT"))

    # gust 30 vs mean 10: 13 kt over the 7 kt tolerance
    assert result.score == 100 - 3 * 13


def test_variable_or_calm_wind_compares_speed_only():
    assert compare_wind(decode_wind("VRB03KT"), decode_wind("27004KT")).score == 100
    assert compare_wind(decode_wind("CALM"), decode_wind("00000KT")).status == ComparisonStatus.MATCH
    assert compare_wind(decode_wind("CALM"), decode_wind("09015KT")).score == 50


def test_unknown_direction_compares_speed_only():
    result = compare_wind(decode_wind("///15KT"), decode_wind("27012KT"))

    assert result.score == 100
    assert result.status == ComparisonStatus.MATCH
    assert "direction not compared" in result.detail
    # 13 kt apart: 8 over the 5 kt tolerance
    assert compare_wind(decode_wind("27012KT"), decode_wind("///25KT")).score == 100 - 5 * 8


def test_missing_wind():
    assert compare_wind(None, decode_wind("19008KT")).status == ComparisonStatus.MISSING


def test_visibility_outside_tolerance_same_category_is_partial():
    result = compare_visibility(Visibility(meters=3500), Visibility(meters=2000))

    assert result.score == 75
    assert result.status == ComparisonStatus.PARTIAL
    assert result.category_match


def test_visibility_category_crossing_is_capped():
    result = compare_visibility(Visibility(meters=3500), Visibility(meters=1200))

    assert result.forecast_category == "MVFR"
    assert result.observed_category == "IFR"
    assert result.score <= 50
    assert result.status == ComparisonStatus.MISMATCH


def test_visibility_category_match_floor():
    result = compare_visibility(Visibility(meters=9999), Visibility(meters=8000))

    assert result.score == 100
    far = compare_visibility(Visibility(meters=4900), Visibility(meters=1500))
    assert far.score == 70
    assert far.status == ComparisonStatus.PARTIAL


def test_cloud_compares_lowest_ceiling_only():
    result = compare_cloud(_clouds("FEW010", "BKN030", "OVC080"), _clouds("SCT005", "BKN032"))

    assert result.score == 100
    assert result.status == ComparisonStatus.MATCH


def test_cloud_ceiling_on_one_side_only():
    result = compare_cloud(_clouds("SCT020"), _clouds("BKN015"))

    assert result.score == 50
    assert result.status == ComparisonStatus.PARTIAL
    assert result.category_match is False


def test_cloud_no_ceiling_either_side():
    result = compare_cloud(_clouds("CAVOK"), _clouds("NSC"))

    assert result.score == 100
    assert result.category_match


def test_weather_identical_groups_match():
    result = compare_weather(_weather("TSRA"), _weather("TSRA"))

    assert result.score == 100
    assert result.status == ComparisonStatus.MATCH


def test_unforecast_severe_weather_scores_zero():
    assert compare_weather([], _weather("TSRA")).score == 0
    assert compare_weather([], _weather("HZ")).score == 50


def test_weather_false_alarm():
    assert compare_weather(_weather("RA"), []).score == 30
    assert compare_weather(_weather("TSRA"), [], temporary_weight=0.8).score == 40


def test_nsw_counts_as_no_weather():
    assert compare_weather(_weather("NSW"), []).status == ComparisonStatus.MATCH


def test_weather_severity_downgrade_penalised():
    result = compare_weather(_weather("TSRA"), _weather("RA"))

    # overlap 1/2, thunderstorm forecast but only rain observed
    assert result.score == 20
    assert result.status == ComparisonStatus.PARTIAL


def test_temporary_weight_applied_to_weather():
    assert is_severe_weather(_weather("TSRA"))
    assert is_severe_weather(_weather("+RA"))
    assert not is_severe_weather(_weather("-RA"))

    result = compare_weather(_weather("TSRA"), _weather("+TSRA"), temporary_weight=0.8)
    assert result.score == 80


def test_transition_bonus_clamped():
    base = compare_visibility(Visibility(meters=3500), Visibility(meters=2000))

    boosted = with_transition_bonus(base, 15)
    assert boosted.score == 90
    assert with_transition_bonus(boosted, 15).score == 100
    missing = compare_wind(None, None)
    assert with_transition_bonus(missing, 15) is missing
