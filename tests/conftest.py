"""Shared fixtures: isolated settings and doubled outbound providers."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from src.api.main import app
from src.config import Settings
from src.gateway.outbound import get_http_client

_PROVIDER_FIELDS = (
    "openai_api_key",
    "endpoint",
    "transcribe_model_name",
    "translate_openai_api_key",
    "translate_openai_endpoint",
    "translate_openai_model_name",
    "model_name",
    "ollama_endpoint",
    "ollama_model_name",
    "ollama_api_key",
)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings with every provider field blank unless overridden.

    Explicit values win over the developer's real environment.
    """

    def factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {name: "" for name in _PROVIDER_FIELDS}
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return factory


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def outbound() -> list[httpx.Request]:
    """Requests that reached the doubled provider, in order."""
    return []


@pytest.fixture
def provider(outbound: list[httpx.Request]) -> Iterator[Callable[[Handler], None]]:
    """Install a MockTransport handler behind the get_http_client dependency."""

    def install(handler: Handler) -> None:
        def recording(request: httpx.Request) -> httpx.Response:
            outbound.append(request)
            return handler(request)

        app.dependency_overrides[get_http_client] = lambda: httpx.AsyncClient(
            transport=httpx.MockTransport(recording)
        )

    yield install
    app.dependency_overrides.pop(get_http_client, None)
