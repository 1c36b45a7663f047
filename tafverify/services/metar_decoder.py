"""METAR/SPECI decoder.

A single forward pass over whitespace-delimited tokens. Each state consumes at
most one token (repeating groups consume greedily) and passes the cursor on
untouched when its token class does not match. Tokens left over after the last
state are kept verbatim as supplementary information.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tafverify.domain.lexicon import (
    BULLETIN_PREFIX_RE,
    QNH_RE,
    TEMPERATURE_RE,
    is_cloud_token,
    is_qnh_token,
    is_rvr_token,
    is_station_token,
    is_temperature_token,
    is_visibility_token,
    is_weather_token,
    is_wind_token,
    is_wind_variation_token,
)
from tafverify.domain.stations import station_info
from tafverify.domain.timegroups import parse_observation_time
from tafverify.models.fields import CloudKind, CloudLayer, Visibility
from tafverify.models.reports import METARReport
from tafverify.services.field_decoders import (
    decode_cloud,
    decode_weather,
    decode_wind,
    decode_wind_variation,
)
from tafverify.services.tokens import TokenCursor, tokenize

logger = logging.getLogger("tafverify.decoder.metar")

CAVOK_VISIBILITY_M = 10000


def _signed_temperature(raw: str) -> int:
    return -int(raw[1:]) if raw.startswith("M") else int(raw)


def decode_metar(text: Optional[str]) -> Optional[METARReport]:
    """Decode one METAR or SPECI report.

    Returns None for empty input. A report whose station group could not be
    found is still returned (best effort) with ``station`` set to None; callers
    treat that as a failed decode.
    """

    if not isinstance(text, str):
        return None
    raw, tokens = tokenize(text)
    if not tokens:
        return None

    cursor = TokenCursor(tokens)
    fields: dict[str, Any] = {"raw": raw}

    cursor.accept(lambda token: BULLETIN_PREFIX_RE.match(token) is not None)

    report_type = cursor.accept_literal("METAR", "SPECI")
    if report_type:
        fields["report_type"] = report_type
    if cursor.accept_literal("COR"):
        fields["corrected"] = True
    if cursor.accept_literal("NIL"):
        fields["nil"] = True
        return METARReport(**fields)
    if cursor.accept_literal("AUTO"):
        fields["automated"] = True

    station = cursor.accept(is_station_token)
    if station:
        fields["station"] = station
        fields["station_info"] = station_info(station)
    else:
        logger.debug("No station group found in %r", raw)

    token = cursor.peek()
    observed_at = parse_observation_time(token) if token else None
    if observed_at is not None:
        cursor.advance()
        fields["observed_at"] = observed_at

    if cursor.accept_literal("NIL"):
        fields["nil"] = True
        return METARReport(**fields)

    wind_token = cursor.accept(is_wind_token)
    if wind_token:
        fields["wind"] = decode_wind(wind_token)
        variation_token = cursor.accept(is_wind_variation_token)
        if variation_token:
            fields["wind_variation"] = decode_wind_variation(variation_token)

    if cursor.accept_literal("CAVOK"):
        fields["cavok"] = True
        fields["visibility"] = Visibility(meters=CAVOK_VISIBILITY_M)
        fields["clouds"] = (CloudLayer(kind=CloudKind.CLEAR, raw="CAVOK"),)
    else:
        visibility_token = cursor.accept(is_visibility_token)
        if visibility_token:
            fields["visibility"] = Visibility(meters=int(visibility_token))

        fields["rvr"] = tuple(cursor.accept_all(is_rvr_token))

        weather = (decode_weather(token) for token in cursor.accept_all(is_weather_token))
        fields["weather"] = tuple(w for w in weather if w is not None)

        clouds = (decode_cloud(token) for token in cursor.accept_all(is_cloud_token))
        fields["clouds"] = tuple(c for c in clouds if c is not None)

    temperature_token = cursor.accept(is_temperature_token)
    if temperature_token:
        match = TEMPERATURE_RE.match(temperature_token)
        fields["temperature_c"] = _signed_temperature(match.group("temp"))
        fields["dewpoint_c"] = _signed_temperature(match.group("dew"))

    qnh_token = cursor.accept(is_qnh_token)
    if qnh_token:
        fields["qnh_hpa"] = int(QNH_RE.match(qnh_token).group("qnh"))

    supplementary = cursor.remaining()
    if supplementary:
        fields["supplementary"] = tuple(supplementary)

    report = METARReport(**fields)
    logger.debug(
        "Decoded METAR station=%s time=%s supplementary=%d",
        report.station,
        report.observed_at.label if report.observed_at else None,
        len(report.supplementary),
    )
    return report


__all__ = ["decode_metar"]
