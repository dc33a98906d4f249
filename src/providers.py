"""Provider configs, engine enum, and config resolution.

Resolution order everywhere a provider config is consumed:
request-supplied value > environment variable(s) > hard-coded default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.config import Settings
from src.errors import ConfigError

DEFAULT_ENDPOINT = "https://api.openai.com"
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
DEFAULT_TRANSLATE_MODEL = "gpt-5-nano"
DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.1:8b"


class TranslationEngine(str, Enum):
    """Available translation backends."""

    OPENAI = "openai"
    OLLAMA = "ollama"
    GOOGLE = "google"

    @classmethod
    def _missing_(cls, value: object) -> TranslationEngine | None:
        aliases = {
            "openai-compatible": cls.OPENAI,
            "local-model": cls.OLLAMA,
            "public-service": cls.GOOGLE,
        }
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


class ProviderConfig(BaseModel):
    """Connection settings for one provider, as sent by the client.

    Wire names are camelCase (``apiKey``, ``modelName``); Python code uses
    snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    api_key: str | None = Field(default=None, alias="apiKey")
    endpoint: str | None = None
    model_name: str | None = Field(default=None, alias="modelName")


class TranscribeConfig(ProviderConfig):
    """Whisper-compatible transcription provider."""


class TranslateOpenAIConfig(ProviderConfig):
    """OpenAI-compatible Responses API provider."""


class TranslateOllamaConfig(ProviderConfig):
    """Self-hosted Ollama-style generation server."""


@dataclass(frozen=True)
class ResolvedProvider:
    """A provider config with every tier applied."""

    endpoint: str
    model: str
    api_key: str | None = None


def first_set(*values: str | None) -> str | None:
    """Return the first non-blank value, or None."""
    for value in values:
        if value:
            return value
    return None


def resolve_transcribe(config: TranscribeConfig | None, settings: Settings) -> ResolvedProvider:
    """Resolve the transcription provider. Raises ConfigError without a key."""
    config = config or TranscribeConfig()
    api_key = first_set(config.api_key, settings.openai_api_key)
    if not api_key:
        raise ConfigError("OpenAI API key is not configured.")
    endpoint = first_set(config.endpoint, settings.endpoint)
    model = first_set(config.model_name, settings.transcribe_model_name)
    return ResolvedProvider(
        endpoint=_strip(endpoint or DEFAULT_ENDPOINT),
        model=model or DEFAULT_TRANSCRIBE_MODEL,
        api_key=api_key,
    )


def resolve_openai_translate(
    config: TranslateOpenAIConfig | None, settings: Settings
) -> ResolvedProvider:
    """Resolve the OpenAI-compatible translator. Raises ConfigError without a key."""
    config = config or TranslateOpenAIConfig()
    api_key = first_set(
        config.api_key, settings.translate_openai_api_key, settings.openai_api_key
    )
    if not api_key:
        raise ConfigError("OpenAI API key is not configured.")
    endpoint = first_set(config.endpoint, settings.translate_openai_endpoint, settings.endpoint)
    model = first_set(config.model_name, settings.translate_openai_model_name, settings.model_name)
    return ResolvedProvider(
        endpoint=_strip(endpoint or DEFAULT_ENDPOINT),
        model=model or DEFAULT_TRANSLATE_MODEL,
        api_key=api_key,
    )


def resolve_ollama(config: TranslateOllamaConfig | None, settings: Settings) -> ResolvedProvider:
    """Resolve the local-model translator. The API key is optional."""
    config = config or TranslateOllamaConfig()
    endpoint = first_set(config.endpoint, settings.ollama_endpoint)
    return ResolvedProvider(
        endpoint=_strip(endpoint or DEFAULT_OLLAMA_ENDPOINT),
        model=first_set(config.model_name, settings.ollama_model_name) or DEFAULT_OLLAMA_MODEL,
        api_key=first_set(config.api_key, settings.ollama_api_key),
    )


def _strip(endpoint: str) -> str:
    # Endpoints are joined with "/v1/..." paths
    return endpoint.rstrip("/")
