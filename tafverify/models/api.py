"""Request and response bodies for the HTTP layer."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from tafverify.models.reports import METARReport, TAFReport
from tafverify.models.verification import AggregateSummary, VerificationResult


class DecodeRequest(BaseModel):
    """A single report to decode."""

    text: str = Field(..., min_length=1, description="Report text, '=' terminator optional")


class BulletinRequest(BaseModel):
    """Bulletin containing one or more '='-terminated reports."""

    text: str = Field(..., min_length=1, description="Bulletin text")
    report_type: Optional[Literal["METAR", "TAF"]] = Field(
        default=None, description="Type assumed for reports without a leading keyword"
    )


class DecodedBulletin(BaseModel):
    """Reports decoded from a bulletin, with the fragments that failed."""

    metars: list[METARReport] = Field(default_factory=list)
    tafs: list[TAFReport] = Field(default_factory=list)
    failures: list[str] = Field(
        default_factory=list, description="Fragments without a decodable station"
    )


class VerifyRequest(BaseModel):
    """Observations and forecasts to verify against each other."""

    metar_text: str = Field(..., min_length=1, description="METAR bulletin")
    taf_text: str = Field(..., min_length=1, description="TAF bulletin")


class VerifyResponse(BaseModel):
    """Per-observation results plus their aggregate."""

    results: list[VerificationResult] = Field(default_factory=list)
    summary: AggregateSummary
    failures: list[str] = Field(default_factory=list)


class TokenClassification(BaseModel):
    token: str
    token_class: str


__all__ = [
    "BulletinRequest",
    "DecodedBulletin",
    "DecodeRequest",
    "TokenClassification",
    "VerifyRequest",
    "VerifyResponse",
]
