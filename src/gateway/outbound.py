"""Failure boundary shared by every outbound provider call."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from src.config import settings
from src.errors import ParseError, UpstreamError

logger = logging.getLogger(__name__)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI dependency yielding an outbound client, closed after the request.

    ``OUTBOUND_TIMEOUT_SECONDS`` unset means no timeout: a hung provider call
    blocks until the client gives up.
    """
    async with httpx.AsyncClient(timeout=settings.outbound_timeout_seconds) as client:
        yield client


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    label: str | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request and return the 2xx response.

    Args:
        client: Outbound HTTP client.
        method: HTTP method.
        url: Absolute provider URL.
        label: Provider name used to prefix error messages.  Without a label
            the raw provider body is surfaced as-is.
        **kwargs: Passed through to ``httpx.AsyncClient.request``.

    Raises:
        UpstreamError: Transport failure (503) or non-2xx status (502).
    """
    try:
        response = await client.request(method, url, **kwargs)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Outbound %s %s failed: %s", method, url, exc)
        message = str(exc) or f"{label or 'Provider'} call failed."
        raise UpstreamError(message, status_code=503) from exc

    if not response.is_success:
        logger.warning("Outbound %s %s returned %d", method, url, response.status_code)
        body = response.text
        raise UpstreamError(f"{label} API error: {body}" if label else body)
    return response


def decode_json(response: httpx.Response, label: str | None = None) -> Any:
    """Decode a provider body. Raises ParseError carrying the raw body."""
    try:
        return response.json()
    except ValueError as exc:
        body = response.text
        raise ParseError(
            f"Failed to parse {label} response as JSON: {body}" if label else body
        ) from exc


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    label: str | None = None,
    **kwargs: Any,
) -> Any:
    """:func:`send` then :func:`decode_json`."""
    response = await send(client, method, url, label=label, **kwargs)
    return decode_json(response, label)
