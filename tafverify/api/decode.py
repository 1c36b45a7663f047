"""Report decoding endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from tafverify.ingestors import decode_bulletin
from tafverify.models import (
    BulletinRequest,
    DecodedBulletin,
    DecodeRequest,
    METARReport,
    TAFReport,
)
from tafverify.services import decode_metar, decode_taf

from .limits import ensure_report_count_within_limit, ensure_text_within_limit

router = APIRouter(prefix="/api/v1/decode", tags=["decode"])

logger = logging.getLogger("tafverify.api.decode")


def _decode_failed(report_type: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "code": "decode_failed",
            "message": f"No station group found; text is not a decodable {report_type}",
        },
    )


@router.post("/metar", response_model=METARReport, summary="Decode a METAR or SPECI")
async def decode_metar_report(request: DecodeRequest) -> METARReport:
    ensure_text_within_limit(request.text)
    report = decode_metar(request.text)
    if report is None or report.station is None:
        logger.info("METAR decode failed")
        raise _decode_failed("METAR")

    logger.info("Decoded METAR station=%s", report.station)
    return report


@router.post("/taf", response_model=TAFReport, summary="Decode a TAF")
async def decode_taf_report(request: DecodeRequest) -> TAFReport:
    ensure_text_within_limit(request.text)
    report = decode_taf(request.text)
    if report is None or report.station is None:
        logger.info("TAF decode failed")
        raise _decode_failed("TAF")

    logger.info("Decoded TAF station=%s segments=%d", report.station, len(report.segments))
    return report


@router.post(
    "/bulletin",
    response_model=DecodedBulletin,
    summary="Split a bulletin into reports and decode each one",
)
async def decode_bulletin_text(request: BulletinRequest) -> DecodedBulletin:
    """Decode every report in a bulletin; fragments that fail are listed, not fatal."""

    ensure_text_within_limit(request.text)
    bulletin = decode_bulletin(request.text, request.report_type)
    ensure_report_count_within_limit(
        len(bulletin.metars) + len(bulletin.tafs) + len(bulletin.failures)
    )

    logger.info(
        "Decoded bulletin: metars=%d tafs=%d failures=%d",
        len(bulletin.metars),
        len(bulletin.tafs),
        len(bulletin.failures),
    )
    return bulletin
