"""HTTP client wrapper for the transcript gateway API."""

from __future__ import annotations

from typing import Any

import httpx

from src.config import settings
from src.errors import GatewayCallError
from src.session.config_store import ProviderSettings
from src.transcript.models import LoadedTranscript, Segment


class GatewayClient:
    """Calls /api/transcribe and /api/translate, unwrapping the JSON envelope.

    Every failure (transport, non-JSON body, ``{"error": ...}``) is raised as
    GatewayCallError carrying a human-readable message.
    """

    def __init__(self, base_url: str | None = None, http: httpx.Client | None = None) -> None:
        self._http = http or httpx.Client(
            base_url=base_url or settings.api_url,
            timeout=settings.outbound_timeout_seconds,
        )

    def close(self) -> None:
        self._http.close()

    def check_health(self) -> bool:
        """Return True if the gateway responds to /health."""
        try:
            r = self._http.get("/health", timeout=5.0)
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    def transcribe(
        self, filename: str, content: bytes, config: ProviderSettings
    ) -> LoadedTranscript:
        """Upload media for transcription. Segments are empty without timing."""
        data = self._post(
            "/api/transcribe",
            files={"file": (filename, content)},
            data={"openaiConfig": config.transcribe_payload()},
        )
        segments = [
            Segment(
                id=i,
                start=float(s["start"]),
                end=float(s["end"]),
                text=s.get("text", ""),
                ja=s.get("ja") or "",
            )
            for i, s in enumerate(data.get("segments") or [])
        ]
        return LoadedTranscript(transcript=data.get("transcript") or "", segments=segments)

    def translate(self, text: str, config: ProviderSettings) -> str:
        """Translate one piece of text with the configured engine."""
        data = self._post("/api/translate", json={"text": text, **config.translate_payload()})
        return str(data.get("translation") or "")

    def _post(self, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            r = self._http.post(path, **kwargs)
        except httpx.HTTPError as e:
            raise GatewayCallError(f"Gateway request failed: {e}") from e
        try:
            data = r.json()
        except ValueError:
            raise GatewayCallError(r.text or f"Gateway returned HTTP {r.status_code}") from None
        if not isinstance(data, dict):
            raise GatewayCallError(f"Unexpected gateway response: {r.text}")
        if data.get("error"):
            raise GatewayCallError(str(data["error"]))
        if not r.is_success:
            raise GatewayCallError(f"Gateway returned HTTP {r.status_code}")
        return data
