"""Translate endpoint: English text to Japanese via the selected engine."""

from __future__ import annotations

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends

from src.api.models import ErrorResponse, TranslateRequest, TranslateResponse
from src.config import settings
from src.errors import GatewayError, ValidationError
from src.gateway.outbound import get_http_client
from src.gateway.translation import translate_text
from src.providers import TranslationEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/api/translate",
    response_model=TranslateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def translate(
    request: TranslateRequest,
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> TranslateResponse:
    """Translate ``text`` with ``engine`` (openai, ollama or google).

    Every failure, expected or not, comes back as an ``{"error": ...}`` body.
    """
    try:
        engine = TranslationEngine(request.engine)
    except ValueError:
        raise ValidationError(f"Unknown translation engine: {request.engine}") from None

    try:
        translation = await translate_text(
            client,
            request.text,
            engine,
            settings,
            openai_config=request.openai_config,
            ollama_config=request.ollama_config,
        )
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure translating via %s", engine.value)
        raise GatewayError(f"Translation failed: {exc}") from exc

    return TranslateResponse(translation=translation)
