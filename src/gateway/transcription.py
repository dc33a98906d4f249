"""Whisper-compatible transcription proxy."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.config import Settings
from src.errors import ParseError
from src.gateway.outbound import decode_json, send
from src.providers import TranscribeConfig, resolve_transcribe
from src.transcript.models import Segment

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionResult:
    """Full text plus timed segments (None when the provider gave no timing)."""

    transcript: str
    segments: list[Segment] | None = field(default=None)


def parse_config_field(raw: str | None) -> TranscribeConfig | None:
    """Decode the optional JSON-encoded ``openaiConfig`` form field.

    A malformed value is logged and ignored so the environment tier applies.
    """
    if not raw:
        return None
    try:
        return TranscribeConfig.model_validate(json.loads(raw))
    except ValueError as exc:
        logger.warning("Ignoring unparseable transcription config: %s", exc)
        return None


async def transcribe_media(
    client: httpx.AsyncClient,
    filename: str,
    content: bytes,
    config: TranscribeConfig | None,
    settings: Settings,
) -> TranscriptionResult:
    """Send one media file to ``/v1/audio/transcriptions`` (verbose JSON).

    Raises:
        ConfigError: No API key resolves from the request or the environment.
        UpstreamError: The provider failed or answered non-2xx; the message is
            its raw body.
        ParseError: The provider body is not a JSON object or its segment
            timing is not numeric; the message is its raw body.
    """
    provider = resolve_transcribe(config, settings)

    logger.info(
        "Transcribing %s (%d bytes) with model %s", filename, len(content), provider.model
    )
    response = await send(
        client,
        "POST",
        f"{provider.endpoint}/v1/audio/transcriptions",
        headers={"Authorization": f"Bearer {provider.api_key}"},
        files={"file": (filename, content)},
        data={"model": provider.model, "response_format": "verbose_json"},
    )
    data = decode_json(response)
    if not isinstance(data, dict):
        raise ParseError(response.text)
    try:
        segments = _segments_from_provider(data.get("segments"))
    except (TypeError, ValueError) as exc:
        logger.warning("Unusable segment timing from provider: %s", exc)
        raise ParseError(response.text) from exc

    return TranscriptionResult(transcript=data.get("text") or "", segments=segments)


def _segments_from_provider(raw: Any) -> list[Segment] | None:
    """Convert provider segments, renumbering ids by position."""
    if not raw or not isinstance(raw, list):
        return None
    segments: list[Segment] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        segments.append(
            Segment(
                id=len(segments),
                start=float(item.get("start", 0.0)),
                end=float(item.get("end", 0.0)),
                text=str(item.get("text", "")).strip(),
            )
        )
    return segments or None
