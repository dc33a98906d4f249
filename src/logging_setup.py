"""Logging configuration shared by the gateway and the UI."""

from __future__ import annotations

import logging
import sys

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Send application logs to stdout.

    Safe to call more than once: the handler is only installed the first time.
    """
    root = logging.getLogger("src")
    root.setLevel(level)
    if not any(getattr(h, "_transcript_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        handler._transcript_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # Outbound request lines would otherwise repeat every provider call
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
