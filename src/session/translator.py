"""Per-segment translation with progressive updates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.errors import GatewayCallError
from src.transcript.models import Segment, joined_translation

logger = logging.getLogger(__name__)


class TranslationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    HALTED = "halted"


@dataclass
class TranslationPass:
    """Outcome of one run over a segment list."""

    state: TranslationState
    translation: str
    calls: int = 0
    error: str | None = None
    failed_index: int | None = None


class IncrementalTranslator:
    """Translates untranslated segments one at a time, in index order.

    Calls are strictly sequential.  After every successful segment the whole
    list is republished through ``on_update``.  The first failure halts the
    pass; segments after it keep an empty ``ja``.  Segments that already have
    a translation are skipped, so re-running is safe.
    """

    def __init__(
        self,
        translate: Callable[[str], str],
        on_update: Callable[[list[Segment]], None] | None = None,
    ) -> None:
        self._translate = translate
        self._on_update = on_update
        self.state = TranslationState.IDLE

    def run(self, segments: list[Segment]) -> TranslationPass:
        self.state = TranslationState.RUNNING
        calls = 0
        for segment in segments:
            if segment.translated or not segment.text.strip():
                continue
            calls += 1
            try:
                segment.ja = self._translate(segment.text)
            except GatewayCallError as exc:
                logger.warning("Translation halted at segment %d: %s", segment.id, exc)
                self.state = TranslationState.HALTED
                return TranslationPass(
                    state=self.state,
                    translation=joined_translation(segments),
                    calls=calls,
                    error=str(exc),
                    failed_index=segment.id,
                )
            if self._on_update is not None:
                self._on_update(list(segments))

        self.state = TranslationState.COMPLETED
        return TranslationPass(
            state=self.state, translation=joined_translation(segments), calls=calls
        )
