"""Flight category thresholds for visibility and ceiling."""

from __future__ import annotations

from typing import Optional

# (upper bound exclusive, category), checked in order
VISIBILITY_CATEGORIES: tuple[tuple[int, str], ...] = (
    (500, "LIFR"),
    (1500, "IFR"),
    (5000, "MVFR"),
)
VISIBILITY_TOP_CATEGORY = "VFR"

CEILING_CATEGORIES: tuple[tuple[int, str], ...] = (
    (200, "LIFR"),
    (500, "IFR"),
    (1000, "MVFR"),
    (3000, "VFR"),
)
CEILING_TOP_CATEGORY = "VFR+"
NO_CEILING_CATEGORY = "UNLIMITED"


def _categorize(value: int, table: tuple[tuple[int, str], ...], top: str) -> str:
    for bound, category in table:
        if value < bound:
            return category
    return top


def visibility_category(meters: int) -> str:
    return _categorize(meters, VISIBILITY_CATEGORIES, VISIBILITY_TOP_CATEGORY)


def ceiling_category(height_ft: Optional[int]) -> str:
    if height_ft is None:
        return NO_CEILING_CATEGORY
    return _categorize(height_ft, CEILING_CATEGORIES, CEILING_TOP_CATEGORY)


__all__ = [
    "CEILING_CATEGORIES",
    "NO_CEILING_CATEGORY",
    "VISIBILITY_CATEGORIES",
    "ceiling_category",
    "visibility_category",
]
