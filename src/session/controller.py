"""Transcript session: the state behind the player page.

Owns the selected media, the transcript, its segments and translation, and
drives the transcribe-then-translate pipeline.  Errors never escape: they are
recorded in ``error`` and stop the current pipeline, keeping whatever partial
results were already obtained.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from src.errors import GatewayCallError
from src.session.config_store import ProviderSettings
from src.session.translator import IncrementalTranslator, TranslationPass
from src.transcript.files import (
    TranscriptFormatError,
    bilingual_rows,
    parse_transcript_file,
    transcript_download,
)
from src.transcript.models import LoadedTranscript, Segment, joined_translation

logger = logging.getLogger(__name__)

LoadingStage = Literal["transcribe", "translate"]


class Gateway(Protocol):
    def transcribe(
        self, filename: str, content: bytes, config: ProviderSettings
    ) -> LoadedTranscript: ...

    def translate(self, text: str, config: ProviderSettings) -> str: ...


@dataclass
class MediaFile:
    name: str
    data: bytes
    mime_type: str | None = None

    @property
    def is_video(self) -> bool:
        return bool(self.mime_type and self.mime_type.startswith("video/"))


@dataclass
class TranscriptFile:
    name: str
    text: str


class TranscriptSession:
    """Page state plus the operations the UI buttons trigger."""

    def __init__(
        self,
        gateway: Gateway,
        config: ProviderSettings,
        on_update: Callable[[list[Segment]], None] | None = None,
    ) -> None:
        self.gateway = gateway
        self.config = config
        self.on_update = on_update
        self.media: MediaFile | None = None
        self.transcript_file: TranscriptFile | None = None
        self.transcript = ""
        self.segments: list[Segment] = []
        self.translation = ""
        self.error = ""
        self.loading: LoadingStage | None = None
        self.last_pass: TranslationPass | None = None

    # -- inputs ------------------------------------------------------------

    def select_media(self, name: str, data: bytes, mime_type: str | None = None) -> None:
        self.media = MediaFile(name=name, data=data, mime_type=mime_type)

    def load_transcript_file(self, name: str, content: str | bytes) -> None:
        """Select a saved transcript and translate whatever it is missing.

        A TSV file restores its segments and only untranslated ones are sent;
        a plain-text file is translated as a whole.  Raw uploads are decoded
        as UTF-8 with an optional byte-order mark.
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                self.transcript_file = None
                self._reset_results()
                self.error = f"{name} is not a UTF-8 text file ({exc.reason})."
                return
        self.transcript_file = TranscriptFile(name=name, text=content)
        self._apply_transcript_text(content)

    # -- pipeline ----------------------------------------------------------

    def run(self) -> None:
        """Transcribe-and-translate: prefer the transcript file, else the media."""
        self.error = ""
        self.segments = []
        if self.transcript_file is not None:
            self._apply_transcript_text(self.transcript_file.text)
            return
        if self.media is None:
            self.error = "Select an audio file or a transcript first."
            return

        self.loading = "transcribe"
        try:
            result = self.gateway.transcribe(self.media.name, self.media.data, self.config)
        except GatewayCallError as exc:
            self._fail(exc)
            return

        self.transcript = result.transcript
        if result.segments:
            self.segments = result.segments
            self.translate_segments()
        else:
            self._translate_whole_text()

    def translate_segments(self) -> TranslationPass:
        """Run the incremental translator over the current segments."""
        self.loading = "translate"
        self.error = ""
        translator = IncrementalTranslator(
            lambda text: self.gateway.translate(text, self.config),
            on_update=self._publish,
        )
        result = translator.run(self.segments)
        self.translation = result.translation
        if result.error:
            self.error = result.error
        self.loading = None
        self.last_pass = result
        return result

    def clear(self) -> None:
        """Discard the loaded files and all results."""
        self.media = None
        self.transcript_file = None
        self._reset_results()

    # -- outputs -----------------------------------------------------------

    def download(self) -> str:
        return transcript_download(self.segments, self.transcript)

    def rows(self) -> list[tuple[str, str]]:
        return bilingual_rows(self.segments, self.transcript, self.translation)

    # -- internals ---------------------------------------------------------

    def _apply_transcript_text(self, text: str) -> None:
        self._reset_results()
        try:
            loaded = parse_transcript_file(text)
        except TranscriptFormatError as exc:
            self.error = str(exc)
            return

        self.transcript = loaded.transcript
        self.segments = loaded.segments
        if loaded.structured:
            if any(not s.translated for s in self.segments):
                self.translate_segments()
            else:
                self.translation = joined_translation(self.segments)
        elif self.transcript:
            self._translate_whole_text()

    def _reset_results(self) -> None:
        self.transcript = ""
        self.segments = []
        self.translation = ""
        self.error = ""
        self.loading = None
        self.last_pass = None

    def _translate_whole_text(self) -> None:
        self.loading = "translate"
        try:
            self.translation = self.gateway.translate(self.transcript, self.config)
        except GatewayCallError as exc:
            self._fail(exc)
            return
        self.loading = None

    def _publish(self, segments: list[Segment]) -> None:
        self.segments = segments
        if self.on_update is not None:
            self.on_update(segments)

    def _fail(self, exc: GatewayCallError) -> None:
        logger.warning("Pipeline stopped: %s", exc)
        self.error = str(exc) or "An error occurred."
        self.loading = None
