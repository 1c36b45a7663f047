"""TAF decoder.

The header is read like a METAR header. The body is a loop over the remaining
tokens that switches the current segment whenever a change keyword opens a new
one; every field token in between belongs to the segment opened last.
Segments are kept in textual order and never reordered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from tafverify.domain.lexicon import (
    BULLETIN_PREFIX_RE,
    FM_COMBINED_RE,
    is_cloud_token,
    is_station_token,
    is_validity_token,
    is_visibility_token,
    is_weather_token,
    is_wind_token,
)
from tafverify.domain.stations import station_info
from tafverify.domain.timegroups import (
    LONG_TAF_HOURS,
    SHORT_TAF_HOURS,
    build_report_time,
    parse_day_hour,
    parse_observation_time,
    parse_validity,
    validity_duration_hours,
)
from tafverify.models.fields import CloudKind, CloudLayer, Visibility, WeatherPhenomenon, Wind
from tafverify.models.reports import ForecastSegment, SegmentKind, TafDuration, TAFReport
from tafverify.models.time import ReportTime, ValidityPeriod
from tafverify.services.field_decoders import decode_cloud, decode_weather, decode_wind
from tafverify.services.tokens import TokenCursor, tokenize

logger = logging.getLogger("tafverify.decoder.taf")

CAVOK_VISIBILITY_M = 10000
PROBABILITY_KEYWORDS = {"PROB30": 30, "PROB40": 40}


@dataclass
class _SegmentDraft:
    """Mutable accumulator for one segment while the body is being read."""

    kind: SegmentKind
    time: Optional[ReportTime] = None
    window: Optional[ValidityPeriod] = None
    probability: Optional[int] = None
    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    weather: list[WeatherPhenomenon] = field(default_factory=list)
    clouds: list[CloudLayer] = field(default_factory=list)
    tokens: list[str] = field(default_factory=list)

    @property
    def has_fields(self) -> bool:
        return bool(self.wind or self.visibility or self.weather or self.clouds)

    def freeze(self) -> ForecastSegment:
        return ForecastSegment(
            kind=self.kind,
            time=self.time,
            window=self.window,
            probability=self.probability,
            wind=self.wind,
            visibility=self.visibility,
            weather=tuple(self.weather),
            clouds=tuple(self.clouds),
            raw=" ".join(self.tokens),
        )


def _duration_class(hours: Optional[int]) -> TafDuration:
    if hours == SHORT_TAF_HOURS:
        return TafDuration.SHORT
    if hours == LONG_TAF_HOURS:
        return TafDuration.LONG
    return TafDuration.OTHER


def _apply_field_token(draft: _SegmentDraft, token: str) -> bool:
    """Store a wind/visibility/weather/cloud token on ``draft``; False if unrecognised."""

    if is_wind_token(token):
        draft.wind = decode_wind(token)
    elif token == "CAVOK":
        draft.visibility = Visibility(meters=CAVOK_VISIBILITY_M)
        draft.clouds.append(CloudLayer(kind=CloudKind.CLEAR, raw=token))
    elif is_visibility_token(token):
        draft.visibility = Visibility(meters=int(token))
    elif is_weather_token(token):
        phenomenon = decode_weather(token)
        if phenomenon is None:
            return False
        draft.weather.append(phenomenon)
    elif is_cloud_token(token):
        layer = decode_cloud(token)
        if layer is None:
            return False
        draft.clouds.append(layer)
    else:
        return False
    draft.tokens.append(token)
    return True


def _open_change_group(cursor: TokenCursor, current: _SegmentDraft) -> Optional[_SegmentDraft]:
    """Open a new segment if the cursor sits on a change keyword.

    Consumes the keyword and its time group on success; leaves the cursor
    untouched otherwise.
    """

    token = cursor.peek()
    following = cursor.peek_next()

    if token == "FM" and following is not None:
        start = parse_day_hour(following)
        if start is not None:
            cursor.advance(2)
            return _SegmentDraft(kind=SegmentKind.FROM, time=start, tokens=[token, following])

    combined = FM_COMBINED_RE.match(token or "")
    if combined:
        start = build_report_time(
            int(combined.group("day")),
            int(combined.group("hour")),
            int(combined.group("minute")),
            allow_hour_24=True,
        )
        if start is not None:
            cursor.advance()
            return _SegmentDraft(kind=SegmentKind.FROM, time=start, tokens=[token])

    if token in ("BECMG", "TEMPO") and following is not None and is_validity_token(following):
        window = parse_validity(following)
        if window is not None:
            cursor.advance(2)
            kind = SegmentKind.BECOMING if token == "BECMG" else SegmentKind.TEMPORARY
            draft = _SegmentDraft(kind=kind, window=window, tokens=[token, following])
            if (
                kind == SegmentKind.TEMPORARY
                and current.kind == SegmentKind.PROBABILITY
                and current.window is None
                and not current.has_fields
            ):
                draft.probability = current.probability
            return draft

    if token in PROBABILITY_KEYWORDS:
        cursor.advance()
        draft = _SegmentDraft(
            kind=SegmentKind.PROBABILITY,
            probability=PROBABILITY_KEYWORDS[token],
            tokens=[token],
        )
        if following is not None and is_validity_token(following):
            window = parse_validity(following)
            if window is not None:
                cursor.advance()
                draft.window = window
                draft.tokens.append(following)
        return draft

    return None


def decode_taf(text: Optional[str]) -> Optional[TAFReport]:
    """Decode one TAF.

    Returns None for empty input. A TAF whose station group is missing is
    still returned with ``station`` set to None.
    """

    if not isinstance(text, str):
        return None
    raw, tokens = tokenize(text)
    if not tokens:
        return None

    cursor = TokenCursor(tokens)
    fields: dict[str, Any] = {"raw": raw}

    cursor.accept(lambda token: BULLETIN_PREFIX_RE.match(token) is not None)
    cursor.accept_literal("TAF")
    if cursor.accept_literal("AMD"):
        fields["amendment"] = True
    if cursor.accept_literal("COR"):
        fields["correction"] = True

    station = cursor.accept(is_station_token)
    if station:
        fields["station"] = station
        fields["station_info"] = station_info(station)
    else:
        logger.debug("No station group found in %r", raw)

    token = cursor.peek()
    issued_at = parse_observation_time(token) if token else None
    if issued_at is not None:
        cursor.advance()
        fields["issued_at"] = issued_at

    token = cursor.peek()
    validity = parse_validity(token) if token and is_validity_token(token) else None
    if validity is not None:
        cursor.advance()
        fields["validity"] = validity
        fields["validity_hours"] = validity_duration_hours(validity)
        fields["duration_class"] = _duration_class(fields["validity_hours"])

    marker = cursor.accept_literal("NIL", "CNL")
    if marker:
        fields["nil" if marker == "NIL" else "cancelled"] = True
        return TAFReport(**fields)

    drafts = [_SegmentDraft(kind=SegmentKind.BASE)]
    current = 0
    dropped: list[str] = []

    while not cursor.exhausted:
        opened = _open_change_group(cursor, drafts[current])
        if opened is not None:
            drafts.append(opened)
            current = len(drafts) - 1
            continue

        token = cursor.peek()
        cursor.advance()
        if token == "NOSIG":
            fields["nosig"] = True
        elif not _apply_field_token(drafts[current], token):
            dropped.append(token)

    if dropped:
        logger.debug("Dropped %d unrecognised TAF token(s): %s", len(dropped), " ".join(dropped))

    report = TAFReport(
        **fields,
        base=drafts[0].freeze(),
        changes=tuple(draft.freeze() for draft in drafts[1:]),
    )
    logger.debug(
        "Decoded TAF station=%s changes=%d validity_hours=%s",
        report.station,
        len(report.changes),
        report.validity_hours,
    )
    return report


__all__ = ["decode_taf"]
