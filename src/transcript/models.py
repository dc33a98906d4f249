"""Data models for transcripts and their segments."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Segment:
    """A timed span of transcript with source text and optional translation.

    ``id`` is the 0-based position within its sequence.  ``ja`` stays empty
    until the segment is translated.
    """

    id: int
    start: float
    end: float
    text: str
    ja: str = ""

    @property
    def translated(self) -> bool:
        return bool(self.ja)


@dataclass
class LoadedTranscript:
    """Result of reading a transcript file.

    ``segments`` is empty for plain-text files; ``transcript`` is always the
    flat English text.
    """

    transcript: str
    segments: list[Segment] = field(default_factory=list)

    @property
    def structured(self) -> bool:
        return bool(self.segments)


def joined_text(segments: list[Segment]) -> str:
    """Flat transcript: segment texts joined with spaces."""
    return " ".join(s.text for s in segments)


def joined_translation(segments: list[Segment]) -> str:
    """Flat translation: ``ja`` values joined with spaces."""
    return " ".join(s.ja for s in segments)
