from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Deployment settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.  These
    are the second tier of provider config resolution: a request-supplied
    value wins over them, and they win over the hard-coded defaults.
    """

    # Transcription (Whisper-compatible)
    openai_api_key: str = ""
    endpoint: str = ""
    transcribe_model_name: str = ""

    # Translation via an OpenAI-compatible Responses API
    translate_openai_api_key: str = ""
    translate_openai_endpoint: str = ""
    translate_openai_model_name: str = ""
    model_name: str = ""

    # Translation via a self-hosted Ollama-style server
    ollama_endpoint: str = ""
    ollama_model_name: str = ""
    ollama_api_key: str = ""  # Optional, only sent when present

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    outbound_timeout_seconds: float | None = None  # None = wait indefinitely
    max_upload_mb: int = 25

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "protected_namespaces": (),
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
