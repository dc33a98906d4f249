"""Saved transcript files: tab-separated segments or plain text.

A structured file has no header and one segment per line::

    start<TAB>end<TAB>text<TAB>ja

``start``/``end`` are decimal seconds; ``ja`` may be empty.  A file is
structured only when its first line splits into at least four tab fields.
"""

from __future__ import annotations

import re

from src.transcript.models import LoadedTranscript, Segment, joined_text

DOWNLOAD_FILENAME = "transcript.txt"
STRUCTURED_MIN_FIELDS = 4

_EN_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")
_JA_SENTENCE_END = re.compile(r"(?<=[。！？])\s*")


class TranscriptFormatError(ValueError):
    """A structured transcript line could not be parsed."""


def serialize_segments(segments: list[Segment]) -> str:
    """Render segments as TSV lines joined with ``\\n``."""
    return "\n".join(f"{s.start}\t{s.end}\t{s.text}\t{s.ja}" for s in segments)


def transcript_download(segments: list[Segment], transcript: str) -> str:
    """Content for the download button: TSV if segmented, else the flat text."""
    if segments:
        return serialize_segments(segments)
    return transcript


def parse_transcript_file(content: str) -> LoadedTranscript:
    """Parse a saved transcript, restoring segments when it is structured.

    A leading byte-order mark is ignored.

    Raises:
        TranscriptFormatError: A structured line has too few fields or a
            non-numeric timestamp.
    """
    content = content.removeprefix("\ufeff")
    lines = content.splitlines()
    if not lines or len(lines[0].split("\t")) < STRUCTURED_MIN_FIELDS:
        return LoadedTranscript(transcript=content)

    segments: list[Segment] = []
    for line_no, line in enumerate(lines, 1):
        if not line.strip():
            continue
        cols = line.split("\t")
        if len(cols) < 3:
            raise TranscriptFormatError(
                f"Line {line_no}: expected start, end and text columns, got {len(cols)}"
            )
        try:
            start = float(cols[0])
            end = float(cols[1])
        except ValueError as exc:
            raise TranscriptFormatError(f"Line {line_no}: invalid timestamp ({exc})") from exc
        segments.append(
            Segment(
                id=len(segments),
                start=start,
                end=end,
                text=cols[2],
                ja=cols[3] if len(cols) > 3 else "",
            )
        )

    return LoadedTranscript(transcript=joined_text(segments), segments=segments)


def split_sentences(text: str) -> list[str]:
    """Split English text after sentence-ending punctuation."""
    if not text:
        return []
    return [s for s in _EN_SENTENCE_END.split(text) if s]


def split_japanese_sentences(text: str) -> list[str]:
    """Split Japanese text after 。！？, keeping the punctuation."""
    if not text:
        return []
    return [s for s in _JA_SENTENCE_END.split(text) if s]


def bilingual_rows(
    segments: list[Segment], transcript: str, translation: str
) -> list[tuple[str, str]]:
    """Pair English and Japanese lines for the two-column view.

    Segmented transcripts pair each segment with its own ``ja``; plain ones
    pair sentence splits of both texts, padding the shorter side.
    """
    if segments:
        return [(s.text, s.ja) for s in segments]
    english = split_sentences(transcript)
    japanese = split_japanese_sentences(translation)
    size = max(len(english), len(japanese))
    english += [""] * (size - len(english))
    japanese += [""] * (size - len(japanese))
    return list(zip(english, japanese))
