"""Decoded weather field models shared by METAR and TAF reports."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from tafverify.domain.categories import visibility_category


class WindKind(str, Enum):
    """Wind group variants."""

    CALM = "CALM"
    VARIABLE = "VARIABLE"
    DIRECTIONAL = "DIRECTIONAL"
    UNPARSED = "UNPARSED"


class Wind(BaseModel):
    """Surface wind decoded from a single wind group."""

    model_config = ConfigDict(frozen=True)

    kind: WindKind = Field(..., description="Wind variant")
    direction: Optional[int] = Field(
        default=None, ge=0, le=360, description="True direction in degrees (directional winds only)"
    )
    speed: Optional[int] = Field(default=None, description="Mean speed in knots")
    gust: Optional[int] = Field(default=None, description="Gust speed in knots")
    raw: str = Field(default="", description="Original wind token")

    @model_validator(mode="after")
    def _check_speeds(self) -> "Wind":
        if self.speed is not None and self.speed < 0:
            raise ValueError("wind speed must not be negative")
        if self.gust is not None and (self.speed is None or self.gust <= self.speed):
            raise ValueError("gust must exceed the mean wind speed")
        return self

    @property
    def effective_speed(self) -> int:
        """Gust when reported, otherwise the mean speed (0 when unknown)."""

        if self.gust is not None:
            return self.gust
        return self.speed or 0


class WindVariation(BaseModel):
    """Extremes of a variable wind direction (``dddVddd``)."""

    model_config = ConfigDict(frozen=True)

    from_deg: int = Field(..., ge=0, le=360, description="First extreme direction")
    to_deg: int = Field(..., ge=0, le=360, description="Second extreme direction")


class Visibility(BaseModel):
    """Prevailing visibility in metres."""

    model_config = ConfigDict(frozen=True)

    meters: int = Field(..., ge=0, description="Prevailing visibility in metres")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def category(self) -> str:
        return visibility_category(self.meters)


class CloudKind(str, Enum):
    CLEAR = "CLEAR"
    NO_SIGNIFICANT_CLOUD = "NO_SIGNIFICANT_CLOUD"
    VERTICAL_VISIBILITY = "VERTICAL_VISIBILITY"
    LAYER = "LAYER"


class Coverage(str, Enum):
    FEW = "FEW"
    SCATTERED = "SCT"
    BROKEN = "BKN"
    OVERCAST = "OVC"


class ConvectiveType(str, Enum):
    NONE = "NONE"
    CUMULONIMBUS = "CB"
    TOWERING_CUMULUS = "TCU"


class CloudLayer(BaseModel):
    """A single cloud group, or one of the clear-sky shorthands."""

    model_config = ConfigDict(frozen=True)

    kind: CloudKind = Field(..., description="Cloud group variant")
    coverage: Optional[Coverage] = Field(default=None, description="Layer amount (layers only)")
    height_ft: Optional[int] = Field(
        default=None, ge=0, description="Base height in feet; None when reported as ///"
    )
    convective: ConvectiveType = Field(
        default=ConvectiveType.NONE, description="Convective cloud type suffix"
    )
    raw: str = Field(default="", description="Original cloud token")

    @property
    def is_ceiling(self) -> bool:
        """Only broken or overcast layers with a known base form a ceiling."""

        return (
            self.kind == CloudKind.LAYER
            and self.coverage in (Coverage.BROKEN, Coverage.OVERCAST)
            and self.height_ft is not None
        )


class Intensity(str, Enum):
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    HEAVY = "HEAVY"


class WeatherPhenomenon(BaseModel):
    """Present or forecast weather group such as ``+TSRA`` or ``NSW``."""

    model_config = ConfigDict(frozen=True)

    intensity: Intensity = Field(default=Intensity.MODERATE, description="Intensity qualifier")
    descriptor: Optional[str] = Field(
        default=None, description="Descriptor codes, space separated (e.g. 'TS')"
    )
    phenomena: tuple[str, ...] = Field(
        default=(), description="Phenomenon codes in reported order"
    )
    no_significant_weather: bool = Field(
        default=False, description="True for the NSW sentinel"
    )
    description: str = Field(default="", description="Plain-language rendering")
    raw: str = Field(default="", description="Original weather token")

    @model_validator(mode="after")
    def _check_phenomena(self) -> "WeatherPhenomenon":
        if not self.no_significant_weather and not self.phenomena:
            raise ValueError("weather group requires at least one phenomenon code")
        return self

    @property
    def codes(self) -> frozenset[str]:
        """Descriptor and phenomenon codes as a flat set."""

        descriptors = self.descriptor.split() if self.descriptor else []
        return frozenset(descriptors) | frozenset(self.phenomena)


__all__ = [
    "CloudKind",
    "CloudLayer",
    "ConvectiveType",
    "Coverage",
    "Intensity",
    "Visibility",
    "WeatherPhenomenon",
    "Wind",
    "WindKind",
    "WindVariation",
]
