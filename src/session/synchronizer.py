"""Playback-to-segment synchronization."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from enum import Enum
from typing import Protocol

from src.transcript.models import Segment


def active_segment_index(segments: Sequence[Segment], current_time: float) -> int | None:
    """Index of the first segment with ``start <= current_time < end``.

    Segments are expected to be time ordered and non-overlapping; when they
    do overlap the earliest index wins.
    """
    for i, seg in enumerate(segments):
        if seg.start <= current_time < seg.end:
            return i
    return None


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


class TimeSource(Protocol):
    """A media player that reports its position and end-of-media."""

    def subscribe(
        self, on_time: Callable[[float], None], on_ended: Callable[[], None]
    ) -> Callable[[], None]:
        """Register callbacks; return the function that unsubscribes them."""
        ...


class SegmentSynchronizer:
    """Tracks which segment is under the playhead.

    Time updates are only honoured while playing.  ``on_active_change`` fires
    whenever the active index changes, which is where the UI scrolls the
    row into view.
    """

    def __init__(
        self,
        segments: Sequence[Segment] = (),
        on_active_change: Callable[[int | None], None] | None = None,
    ) -> None:
        self._segments: list[Segment] = list(segments)
        self.on_active_change = on_active_change
        self.state = PlaybackState.STOPPED
        self.active_index: int | None = None
        self.current_time = 0.0

    @property
    def segments(self) -> list[Segment]:
        return self._segments

    @segments.setter
    def segments(self, segments: Sequence[Segment]) -> None:
        self._segments = list(segments)
        self._set_active(active_segment_index(self._segments, self.current_time))

    @property
    def playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def highlighted_index(self) -> int | None:
        """Row to highlight: the active index, but only during playback."""
        return self.active_index if self.playing else None

    def play(self) -> None:
        self.state = PlaybackState.PLAYING
        self._set_active(active_segment_index(self._segments, self.current_time))

    def pause(self) -> None:
        self.state = PlaybackState.STOPPED

    def on_time_update(self, current_time: float) -> None:
        if not self.playing:
            return
        self.current_time = current_time
        self._set_active(active_segment_index(self._segments, current_time))

    def on_ended(self) -> None:
        self.state = PlaybackState.STOPPED
        self._set_active(None)

    def seek_to_segment(self, index: int) -> float:
        """Jump to a segment's start and resume playback. Returns the new position."""
        segment = self._segments[index]
        self.current_time = segment.start
        self.state = PlaybackState.PLAYING
        self._set_active(active_segment_index(self._segments, segment.start))
        return segment.start

    @contextmanager
    def bind(self, source: TimeSource) -> Iterator[SegmentSynchronizer]:
        """Subscribe to ``source`` for the duration of the block."""
        unsubscribe = source.subscribe(self.on_time_update, self.on_ended)
        try:
            yield self
        finally:
            unsubscribe()

    def _set_active(self, index: int | None) -> None:
        if index == self.active_index:
            return
        self.active_index = index
        if self.on_active_change is not None:
            self.on_active_change(index)
