"""Verification and station lookup endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path, status

from tafverify.domain.stations import StationInfo, station_info
from tafverify.ingestors import decode_bulletin
from tafverify.models import VerifyRequest, VerifyResponse
from tafverify.services import summarize, verify_all

from .limits import ensure_report_count_within_limit, ensure_text_within_limit

router = APIRouter(prefix="/api/v1", tags=["verification"])

logger = logging.getLogger("tafverify.api.verification")


@router.post(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify METAR observations against TAF forecasts",
)
async def verify_reports(request: VerifyRequest) -> VerifyResponse:
    """Decode both bulletins, verify each observation and summarise the results."""

    ensure_text_within_limit(request.metar_text, "metar_text")
    ensure_text_within_limit(request.taf_text, "taf_text")

    observations = decode_bulletin(request.metar_text, "METAR")
    forecasts = decode_bulletin(request.taf_text, "TAF")
    ensure_report_count_within_limit(len(observations.metars) + len(forecasts.tafs))

    if not observations.metars:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "no_observations", "message": "No decodable METAR in metar_text"},
        )

    results = verify_all(observations.metars, forecasts.tafs)
    summary = summarize(results)

    logger.info(
        "Verification complete: observations=%d forecasts=%d verifiable=%d mean=%s",
        len(observations.metars),
        len(forecasts.tafs),
        summary.verifiable_count,
        summary.mean_score,
    )
    return VerifyResponse(
        results=results,
        summary=summary,
        failures=observations.failures + forecasts.failures,
    )


@router.get(
    "/stations/{code}",
    response_model=StationInfo,
    summary="Look up an aerodrome in the station registry",
)
async def get_station(
    code: str = Path(..., min_length=4, max_length=4, description="ICAO location indicator"),
) -> StationInfo:
    return station_info(code.upper())
