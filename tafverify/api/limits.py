"""Request size guards shared by the routers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from tafverify.config import settings

logger = logging.getLogger("tafverify.api.limits")


def ensure_text_within_limit(text: str, field: str = "text") -> None:
    """Reject payloads longer than the configured bulletin size."""

    if len(text) > settings.max_bulletin_chars:
        logger.warning(
            "Rejected oversized %s: %d chars (limit %d)",
            field,
            len(text),
            settings.max_bulletin_chars,
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "code": "payload_too_large",
                "message": f"{field} exceeds {settings.max_bulletin_chars} characters",
            },
        )


def ensure_report_count_within_limit(count: int) -> None:
    if count > settings.max_reports_per_request:
        logger.warning(
            "Rejected bulletin with %d reports (limit %d)", count, settings.max_reports_per_request
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "code": "too_many_reports",
                "message": f"At most {settings.max_reports_per_request} reports per request",
            },
        )


__all__ = ["ensure_report_count_within_limit", "ensure_text_within_limit"]
