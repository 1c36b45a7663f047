"""Debug endpoints for inspecting the token classifier."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from tafverify.config import settings
from tafverify.domain.lexicon import classify_token
from tafverify.models import DecodeRequest, TokenClassification
from tafverify.services.tokens import tokenize

from .limits import ensure_text_within_limit

router = APIRouter(prefix="/api/v1/debug", tags=["debug"])

logger = logging.getLogger("tafverify.api.debug")


@router.post(
    "/tokens",
    response_model=list[TokenClassification],
    summary="Classify each token of a report",
)
async def classify_tokens(request: DecodeRequest) -> list[TokenClassification]:
    """Return the lexical class the decoders would see for each token."""

    if not settings.debug_endpoints:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    ensure_text_within_limit(request.text)
    _, tokens = tokenize(request.text)
    logger.debug("Classifying %d tokens", len(tokens))
    return [TokenClassification(token=token, token_class=classify_token(token)) for token in tokens]
