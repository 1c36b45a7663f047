"""Single-token decoders for wind, cloud and weather groups.

Each decoder is total over the tokens its lexicon predicate accepts: numeric
sub-fields that cannot be read become ``None`` rather than raising.
"""

from __future__ import annotations

import logging
from typing import Optional

from tafverify.domain.lexicon import (
    CLOUD_RE,
    DESCRIPTOR_CODES,
    NO_SIGNIFICANT_WEATHER,
    PHENOMENON_CODES,
    VERTICAL_VISIBILITY_RE,
    WIND_RE,
    WIND_VARIATION_RE,
)
from tafverify.models.fields import (
    CloudKind,
    CloudLayer,
    ConvectiveType,
    Coverage,
    Intensity,
    WeatherPhenomenon,
    Wind,
    WindKind,
    WindVariation,
)

logger = logging.getLogger("tafverify.decoder.fields")

CALM_TOKENS = frozenset({"00000KT", "CALM"})

_INTENSITY_SIGNS = {"+": Intensity.HEAVY, "-": Intensity.LIGHT}
_INTENSITY_WORDS = {Intensity.HEAVY: "Heavy ", Intensity.LIGHT: "Light ", Intensity.MODERATE: ""}

_CLEAR_TOKENS = {
    "SKC": CloudKind.CLEAR,
    "CAVOK": CloudKind.CLEAR,
    "NSC": CloudKind.NO_SIGNIFICANT_CLOUD,
}


def _to_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


def decode_wind(token: str) -> Wind:
    """Decode ``dddff[Gff]KT``, ``VRBff[Gff]KT``, ``00000KT`` or ``CALM``."""

    if token in CALM_TOKENS:
        return Wind(kind=WindKind.CALM, speed=0, raw=token)

    match = WIND_RE.match(token)
    if not match:
        return Wind(kind=WindKind.UNPARSED, raw=token)

    speed = _to_int(match.group("speed"))
    gust = _to_int(match.group("gust"))
    if speed is None:
        return Wind(kind=WindKind.UNPARSED, raw=token)
    if gust is not None and gust <= speed:
        logger.debug("Dropping gust %s not above mean speed in %s", gust, token)
        gust = None

    direction_raw = match.group("dir")
    if direction_raw == "VRB":
        return Wind(kind=WindKind.VARIABLE, speed=speed, gust=gust, raw=token)

    direction = _to_int(direction_raw)
    if direction is not None and direction > 360:
        logger.debug("Discarding out-of-range wind direction in %s", token)
        direction = None
    return Wind(kind=WindKind.DIRECTIONAL, direction=direction, speed=speed, gust=gust, raw=token)


def decode_wind_variation(token: str) -> Optional[WindVariation]:
    match = WIND_VARIATION_RE.match(token)
    if not match:
        return None
    from_deg, to_deg = int(match.group("from")), int(match.group("to"))
    if from_deg > 360 or to_deg > 360:
        return None
    return WindVariation(from_deg=from_deg, to_deg=to_deg)


def decode_cloud(token: str) -> Optional[CloudLayer]:
    """Decode a cloud group; heights are reported in hundreds of feet."""

    if token in _CLEAR_TOKENS:
        return CloudLayer(kind=_CLEAR_TOKENS[token], raw=token)

    vertical = VERTICAL_VISIBILITY_RE.match(token)
    if vertical:
        height = _to_int(vertical.group("height"))
        return CloudLayer(
            kind=CloudKind.VERTICAL_VISIBILITY,
            height_ft=height * 100 if height is not None else None,
            raw=token,
        )

    match = CLOUD_RE.match(token)
    if not match:
        return None
    height = _to_int(match.group("height"))
    convective = match.group("convective")
    return CloudLayer(
        kind=CloudKind.LAYER,
        coverage=Coverage(match.group("coverage")),
        height_ft=height * 100 if height is not None else None,
        convective=ConvectiveType(convective) if convective else ConvectiveType.NONE,
        raw=token,
    )


def no_significant_weather() -> WeatherPhenomenon:
    return WeatherPhenomenon(
        no_significant_weather=True,
        description="No Significant Weather",
        raw=NO_SIGNIFICANT_WEATHER,
    )


def decode_weather(token: str) -> Optional[WeatherPhenomenon]:
    """Split a weather group into intensity, descriptors and phenomena.

    The rendering joins the intensity word, descriptor words and the phenomena
    joined with "and", e.g. ``+TSRA`` -> "Heavy Thunderstorm Rain".
    """

    if token == NO_SIGNIFICANT_WEATHER:
        return no_significant_weather()

    body = token
    intensity = Intensity.MODERATE
    if body[:1] in _INTENSITY_SIGNS:
        intensity = _INTENSITY_SIGNS[body[:1]]
        body = body[1:]

    descriptors: list[str] = []
    phenomena: list[str] = []
    for i in range(0, len(body), 2):
        code = body[i:i + 2]
        if code in DESCRIPTOR_CODES:
            descriptors.append(code)
        elif code in PHENOMENON_CODES and code not in phenomena:
            phenomena.append(code)

    if not phenomena:
        logger.debug("Weather token %s carries no phenomenon code", token)
        return None

    descriptor_text = "".join(DESCRIPTOR_CODES[code] + " " for code in descriptors)
    description = (
        _INTENSITY_WORDS[intensity]
        + descriptor_text
        + " and ".join(PHENOMENON_CODES[code] for code in phenomena)
    )
    return WeatherPhenomenon(
        intensity=intensity,
        descriptor=" ".join(descriptors) or None,
        phenomena=tuple(phenomena),
        description=description,
        raw=token,
    )


__all__ = [
    "decode_cloud",
    "decode_weather",
    "decode_wind",
    "decode_wind_variation",
    "no_significant_weather",
]
