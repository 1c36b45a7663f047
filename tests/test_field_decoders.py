from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.models.fields import CloudKind, ConvectiveType, Coverage, Intensity, Wind, WindKind
from tafverify.services.field_decoders import (
    decode_cloud,
    decode_weather,
    decode_wind,
    decode_wind_variation,
)


@pytest.mark.parametrize("direction,speed", [(190, 8), (0, 12), (360, 45), (90, 100)])
def test_directional_wind(direction, speed):
    token = f"{direction:03d}{speed:02d}KT"

    wind = decode_wind(token)

    assert wind.kind == WindKind.DIRECTIONAL
    assert wind.direction == direction
    assert wind.speed == speed
    assert wind.gust is None


@pytest.mark.parametrize("token", ["00000KT", "CALM"])
def test_calm_wind(token):
    wind = decode_wind(token)

    assert wind.kind == WindKind.CALM
    assert wind.speed == 0
    assert wind.direction is None


def test_variable_wind_keeps_speed_and_gust():
    wind = decode_wind("VRB05G15KT")

    assert wind.kind == WindKind.VARIABLE
    assert wind.direction is None
    assert (wind.speed, wind.gust) == (5, 15)


def test_gust_not_above_mean_speed_is_dropped():
    wind = decode_wind("27015G10KT")

    assert wind.speed == 15
    assert wind.gust is None


def test_unreadable_wind_direction_keeps_speed():
    wind = decode_wind("///05KT")

    assert wind.kind == WindKind.DIRECTIONAL
    assert wind.direction is None
    assert wind.speed == 5
    assert decode_wind("40010KT").direction is None
    assert decode_wind("40010KT").speed == 10


def test_unreadable_wind_speed_is_unparsed_not_zero():
    assert decode_wind("400//KT").kind == WindKind.UNPARSED
    assert decode_wind("270//KT").speed is None


def test_wind_model_rejects_gust_below_speed():
    with pytest.raises(ValidationError):
        Wind(kind=WindKind.DIRECTIONAL, direction=90, speed=20, gust=10)


def test_wind_variation():
    variation = decode_wind_variation("160V220")

    assert (variation.from_deg, variation.to_deg) == (160, 220)
    assert decode_wind_variation("160V400") is None


@pytest.mark.parametrize("height", [0, 1, 18, 100, 250, 999])
def test_cloud_layer_height_is_hundreds_of_feet(height):
    layer = decode_cloud(f"BKN{height:03d}")

    assert layer.kind == CloudKind.LAYER
    assert layer.coverage == Coverage.BROKEN
    assert layer.height_ft == height * 100
    assert layer.is_ceiling


def test_convective_suffix_and_unknown_height():
    cb = decode_cloud("FEW025CB")
    unknown = decode_cloud("OVC///")

    assert cb.convective == ConvectiveType.CUMULONIMBUS
    assert not cb.is_ceiling
    assert unknown.height_ft is None
    assert not unknown.is_ceiling


def test_clear_sky_and_vertical_visibility():
    assert decode_cloud("SKC").kind == CloudKind.CLEAR
    assert decode_cloud("CAVOK").kind == CloudKind.CLEAR
    assert decode_cloud("NSC").kind == CloudKind.NO_SIGNIFICANT_CLOUD
    vv = decode_cloud("VV002")
    assert vv.kind == CloudKind.VERTICAL_VISIBILITY
    assert vv.height_ft == 200


def test_weather_decomposition_and_description():
    weather = decode_weather("+TSRA")

    assert weather.intensity == Intensity.HEAVY
    assert weather.descriptor == "TS"
    assert weather.phenomena == ("RA",)
    assert weather.codes == frozenset({"TS", "RA"})
    assert weather.description == "Heavy Thunderstorm Rain"


def test_weather_with_several_phenomena():
    weather = decode_weather("-SHRASN")

    assert weather.intensity == Intensity.LIGHT
    assert weather.phenomena == ("RA", "SN")
    assert weather.description == "Light Showers Rain and Snow"


def test_no_significant_weather_sentinel():
    weather = decode_weather("NSW")

    assert weather.no_significant_weather
    assert weather.phenomena == ()
