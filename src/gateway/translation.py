"""English-to-Japanese translation proxy with three interchangeable backends."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.config import Settings
from src.errors import ValidationError
from src.gateway.outbound import request_json
from src.providers import (
    TranslateOllamaConfig,
    TranslateOpenAIConfig,
    TranslationEngine,
    resolve_ollama,
    resolve_openai_translate,
)

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
SOURCE_LANG = "en"
TARGET_LANG = "ja"

_OPENAI_INSTRUCTION = (
    "You are a skilled English-to-Japanese translator. Translate the given English "
    "text into natural Japanese. Output nothing except the Japanese translation."
)
_OLLAMA_INSTRUCTION = (
    "You are a skilled English to Japanese translator. "
    "Translate the following English text into natural Japanese."
)


async def translate_text(
    client: httpx.AsyncClient,
    text: str | None,
    engine: TranslationEngine,
    settings: Settings,
    openai_config: TranslateOpenAIConfig | None = None,
    ollama_config: TranslateOllamaConfig | None = None,
) -> str:
    """Dispatch ``text`` to exactly one backend and return the translation.

    Raises:
        ValidationError: ``text`` is empty.
        ConfigError: The OpenAI-compatible backend has no API key.
        UpstreamError, ParseError: The backend call failed.
    """
    if not text:
        raise ValidationError("There is no text to translate.")

    if engine is TranslationEngine.GOOGLE:
        return await translate_with_google(client, text)
    if engine is TranslationEngine.OLLAMA:
        return await translate_with_ollama(client, text, ollama_config, settings)
    return await translate_with_openai(client, text, openai_config, settings)


async def translate_with_openai(
    client: httpx.AsyncClient,
    text: str,
    config: TranslateOpenAIConfig | None,
    settings: Settings,
) -> str:
    provider = resolve_openai_translate(config, settings)
    logger.info("Translating %d chars via OpenAI-compatible model %s", len(text), provider.model)

    data = await request_json(
        client,
        "POST",
        f"{provider.endpoint}/v1/responses",
        label="OpenAI",
        headers={"Authorization": f"Bearer {provider.api_key}"},
        json={"model": provider.model, "input": f"{_OPENAI_INSTRUCTION}\n\n{text}"},
    )
    return extract_responses_text(data)


def extract_responses_text(data: Any) -> str:
    """Pull text from a Responses API body.

    Prefers the flat ``output_text`` field, then ``output[0].content[0].text``.
    """
    if not isinstance(data, dict):
        return ""
    if data.get("output_text"):
        return str(data["output_text"])
    output = data.get("output")
    if isinstance(output, list) and output and isinstance(output[0], dict):
        content = output[0].get("content")
        if isinstance(content, list) and content and isinstance(content[0], dict):
            return str(content[0].get("text") or "")
    return ""


async def translate_with_ollama(
    client: httpx.AsyncClient,
    text: str,
    config: TranslateOllamaConfig | None,
    settings: Settings,
) -> str:
    provider = resolve_ollama(config, settings)
    logger.info("Translating %d chars via local model %s", len(text), provider.model)

    headers = {"Authorization": f"Bearer {provider.api_key}"} if provider.api_key else {}
    data = await request_json(
        client,
        "POST",
        f"{provider.endpoint}/api/generate",
        label="Ollama",
        headers=headers,
        json={
            "model": provider.model,
            "prompt": f"{_OLLAMA_INSTRUCTION}\n\n{text}",
            "stream": False,
        },
    )
    if not isinstance(data, dict):
        return ""
    return str(data.get("response") or data.get("output") or "")


async def translate_with_google(client: httpx.AsyncClient, text: str) -> str:
    """Translate through the public Google Translate web endpoint (no config)."""
    logger.info("Translating %d chars via Google Translate", len(text))
    data = await request_json(
        client,
        "GET",
        GOOGLE_TRANSLATE_URL,
        label="Google Translate",
        params={"client": "gtx", "sl": SOURCE_LANG, "tl": TARGET_LANG, "dt": "t", "q": text},
    )
    # Shape: [[["翻訳", "source", ...], ...], ...]
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return ""
    return "".join(
        str(chunk[0]) for chunk in data[0] if isinstance(chunk, list) and chunk and chunk[0]
    )
