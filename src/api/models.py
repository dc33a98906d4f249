"""Pydantic request/response schemas for the transcript gateway API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.providers import TranslateOllamaConfig, TranslateOpenAIConfig, TranslationEngine
from src.transcript.models import Segment


class SegmentPayload(BaseModel):
    """A timed transcript segment as sent over the wire."""

    id: int
    start: float
    end: float
    text: str
    ja: str | None = None

    @classmethod
    def from_segment(cls, segment: Segment) -> SegmentPayload:
        return cls(
            id=segment.id,
            start=segment.start,
            end=segment.end,
            text=segment.text,
            ja=segment.ja or None,
        )


class TranscribeResponse(BaseModel):
    """Response body for the /api/transcribe endpoint."""

    transcript: str
    segments: list[SegmentPayload] | None = None


class TranslateRequest(BaseModel):
    """Request body for the /api/translate endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    engine: str = TranslationEngine.OPENAI.value
    openai_config: TranslateOpenAIConfig | None = Field(default=None, alias="openaiConfig")
    ollama_config: TranslateOllamaConfig | None = Field(default=None, alias="ollamaConfig")


class TranslateResponse(BaseModel):
    """Response body for the /api/translate endpoint."""

    translation: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every route on failure."""

    error: str
