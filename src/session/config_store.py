"""Session-scoped provider settings and their load/save boundary."""

from __future__ import annotations

import json
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

from src.providers import (
    ProviderConfig,
    TranscribeConfig,
    TranslateOllamaConfig,
    TranslateOpenAIConfig,
    TranslationEngine,
)

SESSION_KEY = "provider_settings"


@dataclass
class ProviderSettings:
    """Explicit configuration context passed into every gateway call."""

    engine: TranslationEngine = TranslationEngine.OPENAI
    transcribe: TranscribeConfig = field(default_factory=TranscribeConfig)
    openai: TranslateOpenAIConfig = field(default_factory=TranslateOpenAIConfig)
    ollama: TranslateOllamaConfig = field(default_factory=TranslateOllamaConfig)

    @classmethod
    def defaults(cls) -> ProviderSettings:
        """Every provider field blank.

        Blank fields are left out of requests, so the gateway resolves them
        from its own environment and then its hard-coded defaults.
        """
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine": self.engine.value,
            "transcribe": self.transcribe.model_dump(by_alias=True),
            "openai": self.openai.model_dump(by_alias=True),
            "ollama": self.ollama.model_dump(by_alias=True),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderSettings:
        return cls(
            engine=TranslationEngine(data.get("engine", TranslationEngine.OPENAI.value)),
            transcribe=TranscribeConfig.model_validate(data.get("transcribe") or {}),
            openai=TranslateOpenAIConfig.model_validate(data.get("openai") or {}),
            ollama=TranslateOllamaConfig.model_validate(data.get("ollama") or {}),
        )

    def translate_payload(self) -> dict[str, Any]:
        """Engine and provider configs in the /api/translate wire shape."""
        return {
            "engine": self.engine.value,
            "openaiConfig": _filled(self.openai),
            "ollamaConfig": _filled(self.ollama),
        }

    def transcribe_payload(self) -> str:
        """The JSON-encoded ``openaiConfig`` form field for /api/transcribe."""
        return json.dumps(_filled(self.transcribe), separators=(",", ":"))


def _filled(config: ProviderConfig) -> dict[str, str]:
    # Blank fields are omitted
    return {k: v for k, v in config.model_dump(by_alias=True).items() if v}


class SessionConfigStore:
    """Loads and saves ProviderSettings in a session-scoped mapping.

    The mapping is ``st.session_state`` in the UI; it only ever holds the
    plain-dict form, so callers get an independent copy on every load.
    """

    def __init__(self, state: MutableMapping[str, Any]) -> None:
        self._state = state

    def load(self) -> ProviderSettings:
        if SESSION_KEY not in self._state:
            return self.reset()
        return ProviderSettings.from_dict(self._state[SESSION_KEY])

    def save(self, config: ProviderSettings) -> None:
        self._state[SESSION_KEY] = config.to_dict()

    def reset(self) -> ProviderSettings:
        config = ProviderSettings.defaults()
        self.save(config)
        return config
