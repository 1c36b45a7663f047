"""Decoding, verification and aggregation services."""

from .aggregation import summarize
from .metar_decoder import decode_metar
from .taf_decoder import decode_taf
from .verification_engine import (
    VerificationEngine,
    get_verification_engine,
    resolve_active_segment,
    select_forecast,
    verify,
    verify_all,
)

__all__ = [
    "VerificationEngine",
    "decode_metar",
    "decode_taf",
    "get_verification_engine",
    "resolve_active_segment",
    "select_forecast",
    "summarize",
    "verify",
    "verify_all",
]
