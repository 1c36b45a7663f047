from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.models.fields import CloudKind, WindKind
from tafverify.services.metar_decoder import decode_metar

VECC_METAR = "METAR VECC 111000Z 19012KT 2000 +TSRA SCT012 FEW025CB OVC080 26/21 Q1006="


def test_decodes_full_report():
    report = decode_metar(VECC_METAR)

    assert report.report_type == "METAR"
    assert report.station == "VECC"
    assert report.station_info.name == "Kolkata (NSCBI Airport)"
    assert report.observed_at.label == "111000Z"
    assert report.wind.direction == 190
    assert report.wind.speed == 12
    assert report.visibility.meters == 2000
    assert [w.raw for w in report.weather] == ["+TSRA"]
    assert [c.raw for c in report.clouds] == ["SCT012", "FEW025CB", "OVC080"]
    assert (report.temperature_c, report.dewpoint_c) == (26, 21)
    assert report.qnh_hpa == 1006
    assert report.supplementary == ()
    assert report.raw.endswith("Q1006")


def test_empty_input_returns_none():
    assert decode_metar("") is None
    assert decode_metar("   =  ") is None
    assert decode_metar(None) is None


def test_missing_station_is_reported_as_none():
    report = decode_metar("111000Z 19012KT 2000")

    assert report is not None
    assert report.station is None
    assert report.observed_at.label == "111000Z"


def test_bulletin_prefix_speci_and_markers():
    report = decode_metar("202401111030 SPECI COR AUTO VIDP 111030Z 00000KT 0400 FG VV002 M01/M02 Q1020")

    assert report.report_type == "SPECI"
    assert report.corrected
    assert report.automated
    assert report.wind.kind == WindKind.CALM
    assert report.clouds[0].kind == CloudKind.VERTICAL_VISIBILITY
    assert (report.temperature_c, report.dewpoint_c) == (-1, -2)


def test_cavok_sets_visibility_and_clear_sky():
    report = decode_metar("METAR VABB 121200Z 27010KT CAVOK 30/24 Q1010=")

    assert report.cavok
    assert report.visibility.meters == 10000
    assert [c.kind for c in report.clouds] == [CloudKind.CLEAR]
    assert report.temperature_c == 30


def test_variable_direction_rvr_and_trend_tokens():
    report = decode_metar(
        "METAR VIDP 110300Z 24008KT 200V280 0800 R28/1200N BR NSC 12/11 Q1018 NOSIG"
    )

    assert report.wind_variation.from_deg == 200
    assert report.rvr == ("R28/1200N",)
    assert report.weather[0].phenomena == ("BR",)
    assert report.clouds[0].kind == CloudKind.NO_SIGNIFICANT_CLOUD
    assert report.supplementary == ("NOSIG",)


def test_unrecognised_tokens_are_skipped():
    report = decode_metar("METAR VECC 111000Z 19012KT 9999 XYZ SCT030 26/21 Q1006")

    assert report.visibility.meters == 9999
    assert report.clouds == ()
    assert report.supplementary == ("XYZ", "SCT030", "26/21", "Q1006")


def test_nil_report_is_terminal():
    report = decode_metar("METAR VEGY 111000Z NIL=")

    assert report.nil
    assert report.station == "VEGY"
    assert report.wind is None
