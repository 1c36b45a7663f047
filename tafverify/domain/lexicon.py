"""Token classes for METAR and TAF groups.

Every predicate takes one whitespace-delimited token and answers whether it
belongs to a group class. They hold no state and never raise.
"""

from __future__ import annotations

import re

INTENSITY_PREFIXES = ("+", "-")

# Descriptor codes (9) and phenomenon codes (21) with plain-language names
DESCRIPTOR_CODES: dict[str, str] = {
    "MI": "Shallow",
    "BC": "Patches",
    "PR": "Partial",
    "DR": "Low Drifting",
    "BL": "Blowing",
    "SH": "Showers",
    "TS": "Thunderstorm",
    "FZ": "Freezing",
    "VC": "Vicinity",
}

PHENOMENON_CODES: dict[str, str] = {
    "DZ": "Drizzle",
    "RA": "Rain",
    "SN": "Snow",
    "SG": "Snow Grains",
    "IC": "Ice Crystals",
    "PL": "Ice Pellets",
    "GR": "Hail",
    "GS": "Small Hail",
    "UP": "Unknown Precipitation",
    "BR": "Mist",
    "FG": "Fog",
    "FU": "Smoke",
    "VA": "Volcanic Ash",
    "DU": "Dust",
    "SA": "Sand",
    "HZ": "Haze",
    "PO": "Dust/Sand Whirls",
    "SQ": "Squalls",
    "FC": "Funnel Cloud",
    "SS": "Sandstorm",
    "DS": "Duststorm",
}

NO_SIGNIFICANT_WEATHER = "NSW"
CLEAR_SKY_TOKENS = frozenset({"NSC", "SKC", "CAVOK"})
CHANGE_KEYWORDS = frozenset({"FM", "BECMG", "TEMPO", "PROB30", "PROB40", "NOSIG"})

_descriptors = "|".join(DESCRIPTOR_CODES)
_phenomena = "|".join(PHENOMENON_CODES)

WIND_RE = re.compile(
    r"^(?P<dir>\d{3}|VRB|///)(?P<speed>\d{2,3}|//)(?:G(?P<gust>\d{2,3}))?KT$"
)
WIND_VARIATION_RE = re.compile(r"^(?P<from>\d{3})V(?P<to>\d{3})$")
VISIBILITY_RE = re.compile(r"^\d{4}$")
WEATHER_RE = re.compile(
    rf"^(?P<intensity>[+-])?(?P<descriptor>{_descriptors})?(?P<phenomena>(?:{_phenomena})+)$"
)
CLOUD_RE = re.compile(
    r"^(?P<coverage>FEW|SCT|BKN|OVC)(?P<height>\d{3}|///)(?P<convective>CB|TCU)?$"
)
VERTICAL_VISIBILITY_RE = re.compile(r"^VV(?P<height>\d{3}|///)$")
TIME_RE = re.compile(r"^(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})Z$")
VALIDITY_RE = re.compile(
    r"^(?P<from_day>\d{2})(?P<from_hour>\d{2})/(?P<to_day>\d{2})(?P<to_hour>\d{2})$"
)
FM_TIME_RE = re.compile(r"^(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})?$")
FM_COMBINED_RE = re.compile(r"^FM(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})$")
STATION_RE = re.compile(r"^[A-Z]{4}$")
BULLETIN_PREFIX_RE = re.compile(r"^\d{12}$")
RVR_RE = re.compile(r"^R\w*/")
TEMPERATURE_RE = re.compile(r"^(?P<temp>M?\d{2})/(?P<dew>M?\d{2})$")
QNH_RE = re.compile(r"^Q(?P<qnh>\d{4})$")


def is_wind_token(token: str) -> bool:
    return token == "CALM" or WIND_RE.match(token) is not None


def is_wind_variation_token(token: str) -> bool:
    return WIND_VARIATION_RE.match(token) is not None


def is_visibility_token(token: str) -> bool:
    return VISIBILITY_RE.match(token) is not None


def is_weather_token(token: str) -> bool:
    """Intensity, at most one descriptor, then one or more phenomena (or ``NSW``)."""

    if token == NO_SIGNIFICANT_WEATHER:
        return True
    return WEATHER_RE.match(token) is not None


def is_cloud_token(token: str) -> bool:
    if token in CLEAR_SKY_TOKENS:
        return True
    return CLOUD_RE.match(token) is not None or VERTICAL_VISIBILITY_RE.match(token) is not None


def is_time_token(token: str) -> bool:
    return TIME_RE.match(token) is not None


def is_validity_token(token: str) -> bool:
    return VALIDITY_RE.match(token) is not None


def is_change_keyword(token: str) -> bool:
    return token in CHANGE_KEYWORDS or FM_COMBINED_RE.match(token) is not None


def is_station_token(token: str) -> bool:
    return STATION_RE.match(token) is not None


def is_rvr_token(token: str) -> bool:
    return RVR_RE.match(token) is not None


def is_temperature_token(token: str) -> bool:
    return TEMPERATURE_RE.match(token) is not None


def is_qnh_token(token: str) -> bool:
    return QNH_RE.match(token) is not None


def classify_token(token: str) -> str:
    """Name the first group class a token belongs to, or ``unknown``."""

    checks = (
        ("change", is_change_keyword),
        ("time", is_time_token),
        ("validity", is_validity_token),
        ("wind", is_wind_token),
        ("visibility", is_visibility_token),
        ("weather", is_weather_token),
        ("cloud", is_cloud_token),
        ("station", is_station_token),
    )
    for name, predicate in checks:
        if predicate(token):
            return name
    return "unknown"


__all__ = [
    "CHANGE_KEYWORDS",
    "DESCRIPTOR_CODES",
    "NO_SIGNIFICANT_WEATHER",
    "PHENOMENON_CODES",
    "classify_token",
    "is_change_keyword",
    "is_cloud_token",
    "is_qnh_token",
    "is_rvr_token",
    "is_station_token",
    "is_temperature_token",
    "is_time_token",
    "is_validity_token",
    "is_visibility_token",
    "is_weather_token",
    "is_wind_token",
    "is_wind_variation_token",
]
