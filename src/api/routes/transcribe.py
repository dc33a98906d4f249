"""Transcribe endpoint: forward an uploaded media file to a Whisper-compatible API."""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, File, Form, UploadFile

from src.api.models import ErrorResponse, SegmentPayload, TranscribeResponse
from src.config import settings
from src.errors import ValidationError
from src.gateway.outbound import get_http_client
from src.gateway.transcription import parse_config_field, transcribe_media

router = APIRouter()


@router.post(
    "/api/transcribe",
    response_model=TranscribeResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def transcribe(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    file: Annotated[UploadFile | None, File()] = None,
    openai_config: Annotated[str | None, Form(alias="openaiConfig")] = None,
) -> TranscribeResponse:
    """Transcribe an audio/video upload.

    The optional ``openaiConfig`` form field is a JSON-encoded provider config
    (``apiKey``, ``endpoint``, ``modelName``) that overrides the environment.
    Returns the full text and, when the provider supplies timing, segments.
    """
    if file is None:
        raise ValidationError("No audio file was uploaded.")

    config = parse_config_field(openai_config)

    raw = await file.read()
    if not raw:
        raise ValidationError("The uploaded file is empty.")
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(raw) > max_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {settings.max_upload_mb} MB.", status_code=413
        )

    result = await transcribe_media(client, file.filename or "audio", raw, config, settings)

    segments = None
    if result.segments is not None:
        segments = [SegmentPayload.from_segment(s) for s in result.segments]
    return TranscribeResponse(transcript=result.transcript, segments=segments)
