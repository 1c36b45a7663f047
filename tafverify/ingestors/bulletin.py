"""Bulletin segmentation: turns raw bulletin text into individual reports."""

from __future__ import annotations

import logging
import re
from typing import Optional

from tafverify.domain.lexicon import BULLETIN_PREFIX_RE
from tafverify.models.api import DecodedBulletin
from tafverify.services.metar_decoder import decode_metar
from tafverify.services.taf_decoder import decode_taf

logger = logging.getLogger("tafverify.ingestors.bulletin")

MIN_FRAGMENT_CHARS = 10
REPORT_TERMINATOR = "="

_HEADER_RE = {
    "METAR": re.compile(r"^\d{12}\s+(?:METAR|SPECI)\b"),
    "TAF": re.compile(r"^\d{12}\s+TAF\b"),
}
_ANY_HEADER_RE = re.compile(r"^\d{12}\s+(?:METAR|SPECI|TAF)\b")
_METAR_KEYWORDS = {"METAR", "SPECI"}


def _header_pattern(report_type: Optional[str]) -> re.Pattern[str]:
    return _HEADER_RE.get(report_type or "", _ANY_HEADER_RE)


def split_bulletin(text: Optional[str], report_type: Optional[str] = None) -> list[str]:
    """Split bulletin text into single-report strings.

    Anything above the first ``<12-digit timestamp> <report type>`` line is a
    transmission header and is discarded. Reports are separated by ``=`` when
    the text has any, otherwise one report per line. Fragments shorter than
    ten characters are noise and are dropped.
    """

    if not text:
        return []

    lines = text.splitlines()
    header = _header_pattern(report_type)
    for index, line in enumerate(lines):
        if header.match(line.strip()):
            lines = lines[index:]
            break

    body = "\n".join(lines)
    chunks = body.split(REPORT_TERMINATOR) if REPORT_TERMINATOR in body else body.splitlines()
    fragments = [" ".join(chunk.split()) for chunk in chunks]
    return [fragment for fragment in fragments if len(fragment) >= MIN_FRAGMENT_CHARS]


def detect_report_type(fragment: str, default: Optional[str] = None) -> Optional[str]:
    """Report type from the leading keyword (after an optional timestamp prefix)."""

    tokens = fragment.split()
    if tokens and BULLETIN_PREFIX_RE.match(tokens[0]):
        tokens = tokens[1:]
    if not tokens:
        return default
    if tokens[0] == "TAF":
        return "TAF"
    if tokens[0] in _METAR_KEYWORDS:
        return "METAR"
    return default


def decode_bulletin(text: Optional[str], report_type: Optional[str] = None) -> DecodedBulletin:
    """Decode every report in a bulletin, keeping the fragments that failed."""

    metars = []
    tafs = []
    failures: list[str] = []

    for fragment in split_bulletin(text, report_type):
        kind = detect_report_type(fragment, report_type)
        if kind == "TAF":
            taf = decode_taf(fragment)
            if taf is not None and taf.station is not None:
                tafs.append(taf)
                continue
        elif kind == "METAR":
            metar = decode_metar(fragment)
            if metar is not None and metar.station is not None:
                metars.append(metar)
                continue
        failures.append(fragment)

    if failures:
        logger.info("Bulletin had %d undecodable fragment(s)", len(failures))
    logger.debug("Bulletin decoded: metars=%d tafs=%d", len(metars), len(tafs))
    return DecodedBulletin(metars=metars, tafs=tafs, failures=failures)


__all__ = ["decode_bulletin", "detect_report_type", "split_bulletin"]
