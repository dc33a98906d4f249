"""Gateway error taxonomy.

Every error carries the message that ends up in the ``{"error": ...}``
envelope and the HTTP status it maps to.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for errors surfaced by the gateway routes."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigError(GatewayError):
    """A required credential could not be resolved from any config source."""

    status_code = 500


class ValidationError(GatewayError):
    """Required input (file, text) is missing or unusable."""

    status_code = 400


class UpstreamError(GatewayError):
    """A provider answered with a non-2xx status or could not be reached.

    The message is the raw provider body (or the transport error text).
    """

    status_code = 502


class ParseError(GatewayError):
    """A provider answered 2xx but the body was not valid JSON."""

    status_code = 502


class GatewayCallError(Exception):
    """Client side: a gateway call failed; the message is the envelope's error."""
