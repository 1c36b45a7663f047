from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.models.reports import METARReport, TAFReport
from tafverify.models.verification import Rating, Trend, VerificationResult, VerificationStatus
from tafverify.services.aggregation import longest_run_below, summarize, trend_for
from tafverify.services.metar_decoder import decode_metar
from tafverify.services.taf_decoder import decode_taf
from tafverify.services.verification_engine import rating_for, verification_status, verify_all

_OBSERVATION = METARReport(station="VECC", raw="VECC")
_FORECAST = TAFReport(station="VECC", raw="TAF VECC")


def _result(score, *, forecast=_FORECAST):
    return VerificationResult(
        observation=_OBSERVATION,
        forecast=forecast,
        composite_score=score,
        rating=rating_for(score),
        status=verification_status(score) if forecast else VerificationStatus.NO_VALID_FORECAST,
    )


def test_empty_sequence():
    summary = summarize([])

    assert summary.count == 0
    assert summary.mean_score is None
    assert summary.trend == Trend.STABLE


def test_score_statistics():
    summary = summarize([_result(s) for s in (40, 45, 80, 30, 95)])

    assert summary.mean_score == 58.0
    assert summary.verified_fraction == 0.4
    assert summary.trend == Trend.IMPROVING
    assert summary.consistency == 35.0
    assert summary.longest_poor_run == 2
    assert summary.ratings[Rating.POOR.value] == 3
    assert summary.ratings[Rating.EXCELLENT.value] == 1


def test_unverifiable_results_are_counted_but_excluded():
    results = [_result(90), _result(0, forecast=None), _result(70)]

    summary = summarize(results)

    assert summary.count == 3
    assert summary.verifiable_count == 2
    assert summary.mean_score == 80.0
    assert summary.longest_poor_run == 0
    assert summary.trend == Trend.DEGRADING


def test_trend_threshold():
    assert trend_for([70, 74]) == Trend.STABLE
    assert trend_for([70, 64]) == Trend.DEGRADING
    assert trend_for([50]) == Trend.STABLE


def test_longest_run_below():
    assert longest_run_below([10, 20, 60, 10, 10, 10, 80]) == 3
    assert longest_run_below([]) == 0


def test_parameter_and_contingency_statistics():
    taf = decode_taf(
        "TAF VECC 110500Z 1106/1212 19008KT 3500 HZ SCT018 BKN100 "
        "TEMPO 1108/1112 2000 TSRA SCT015 FEW025CB OVC090"
    )
    metars = [
        decode_metar("METAR VECC 110700Z 19010KT 3500 HZ SCT018 BKN100 28/22 Q1007"),
        decode_metar("METAR VECC 111000Z 19012KT 2000 +TSRA SCT012 FEW025CB OVC080 26/21 Q1006"),
        decode_metar("METAR VECC 111300Z 19014KT 6000 NSC 30/22 Q1006"),
    ]

    summary = summarize(verify_all(metars, [taf]))

    assert summary.verifiable_count == 3
    assert set(summary.parameter_means) == {"wind", "visibility", "weather", "cloud"}
    assert summary.lead_time_means.keys() == {"0-6h", "6-12h"}
    # speed errors 2, 4, 6 kt
    assert summary.wind_speed_rmse == 4.32
    assert summary.weather.hits == 2
    assert summary.weather.false_alarms == 1
    assert summary.weather.misses == 0
    assert summary.weather.pod == 1.0
    assert summary.weather.csi == 0.67
