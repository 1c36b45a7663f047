"""Aerodrome registry used to label decoded reports."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from tafverify.config import settings

logger = logging.getLogger("tafverify.stations")

UNKNOWN_STATION_NAME = "Unknown Station Code"
UNKNOWN_FIR = "Unknown FIR"


class StationInfo(BaseModel):
    """Registry entry for an aerodrome."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="ICAO location indicator")
    name: str = Field(..., description="Aerodrome name")
    fir: str = Field(..., description="Flight information region")
    known: bool = Field(default=True, description="False for the unknown-station placeholder")


BUILTIN_STATIONS: Dict[str, tuple[str, str]] = {
    "VIDP": ("Delhi (IGI Airport)", "Delhi FIR"),
    "VABB": ("Mumbai (CSIA)", "Mumbai FIR"),
    "VECC": ("Kolkata (NSCBI Airport)", "Kolkata FIR"),
    "VOMM": ("Chennai (Chennai Airport)", "Chennai FIR"),
    "VEPT": ("Patna", "Kolkata FIR"),
    "VEGY": ("Gaya", "Kolkata FIR"),
    "VOBL": ("Bengaluru (Kempegowda Airport)", "Chennai FIR"),
    "VOHS": ("Hyderabad (Rajiv Gandhi Airport)", "Chennai FIR"),
    "VAAH": ("Ahmedabad", "Mumbai FIR"),
    "VILK": ("Lucknow", "Delhi FIR"),
    "VEGT": ("Guwahati", "Kolkata FIR"),
    "VEBS": ("Bhubaneswar", "Kolkata FIR"),
}


def _load_registry_file(path: str) -> Dict[str, tuple[str, str]]:
    """Read ``{"CODE": {"name": ..., "fir": ...}}`` entries from a JSON file."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Station registry %s could not be loaded: %s", path, exc)
        return {}

    if not isinstance(payload, dict):
        logger.warning("Station registry %s is not a JSON object; ignoring", path)
        return {}

    entries: Dict[str, tuple[str, str]] = {}
    for code, entry in payload.items():
        if not isinstance(entry, dict) or "name" not in entry:
            logger.debug("Skipping malformed registry entry for %s", code)
            continue
        entries[str(code).upper()] = (str(entry["name"]), str(entry.get("fir", UNKNOWN_FIR)))
    logger.info("Loaded %d station(s) from %s", len(entries), path)
    return entries


@lru_cache(maxsize=1)
def _registry() -> Dict[str, tuple[str, str]]:
    stations = dict(BUILTIN_STATIONS)
    if settings.station_registry_path:
        stations.update(_load_registry_file(settings.station_registry_path))
    return stations


def reload_registry() -> None:
    """Drop the cached table so the next lookup re-reads settings."""

    _registry.cache_clear()


def station_info(code: Optional[str]) -> StationInfo:
    """Look up a station; unknown codes resolve to a placeholder entry."""

    key = (code or "").upper()
    entry = _registry().get(key)
    if entry is None:
        return StationInfo(code=key, name=UNKNOWN_STATION_NAME, fir=UNKNOWN_FIR, known=False)
    name, fir = entry
    return StationInfo(code=key, name=name, fir=fir, known=True)


__all__ = ["BUILTIN_STATIONS", "StationInfo", "reload_registry", "station_info"]
