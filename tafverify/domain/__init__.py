"""Domain tables for METAR/TAF tokens, flight categories and stations."""

from .categories import ceiling_category, visibility_category
from .lexicon import (
    classify_token,
    is_change_keyword,
    is_cloud_token,
    is_time_token,
    is_validity_token,
    is_visibility_token,
    is_weather_token,
    is_wind_token,
)

__all__ = [
    "ceiling_category",
    "classify_token",
    "is_change_keyword",
    "is_cloud_token",
    "is_time_token",
    "is_validity_token",
    "is_visibility_token",
    "is_weather_token",
    "is_wind_token",
    "visibility_category",
]
