"""Tests for playback-to-segment synchronization."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from src.session.synchronizer import PlaybackState, SegmentSynchronizer, active_segment_index
from src.transcript.models import Segment


def _segments(*spans: tuple[float, float]) -> list[Segment]:
    return [Segment(id=i, start=s, end=e, text=f"seg {i}") for i, (s, e) in enumerate(spans)]


class FakePlayer:
    """Minimal TimeSource: records subscriptions and lets tests emit events."""

    def __init__(self) -> None:
        self.on_time: Callable[[float], None] | None = None
        self.on_ended: Callable[[], None] | None = None

    def subscribe(
        self, on_time: Callable[[float], None], on_ended: Callable[[], None]
    ) -> Callable[[], None]:
        self.on_time, self.on_ended = on_time, on_ended

        def unsubscribe() -> None:
            self.on_time = self.on_ended = None

        return unsubscribe


class TestActiveSegmentIndex:
    @pytest.mark.parametrize(
        ("t", "expected"),
        [(0.0, 0), (1.49, 0), (1.5, 1), (2.99, 1), (3.0, None), (4.0, 2), (-1.0, None)],
    )
    def test_half_open_intervals(self, t: float, expected: int | None) -> None:
        segments = _segments((0.0, 1.5), (1.5, 3.0), (3.5, 5.0))
        assert active_segment_index(segments, t) == expected

    def test_overlap_earliest_index_wins(self) -> None:
        segments = _segments((0.0, 4.0), (2.0, 6.0))
        assert active_segment_index(segments, 3.0) == 0
        assert active_segment_index(segments, 5.0) == 1

    def test_empty(self) -> None:
        assert active_segment_index([], 1.0) is None

    def test_zero_length_segment_never_matches(self) -> None:
        assert active_segment_index(_segments((1.0, 1.0)), 1.0) is None


class TestSegmentSynchronizer:
    def test_time_updates_ignored_while_stopped(self) -> None:
        sync = SegmentSynchronizer(_segments((0, 1), (1, 2)))
        sync.on_time_update(1.5)
        assert sync.state is PlaybackState.STOPPED
        assert sync.active_index is None

    def test_playing_tracks_active_index(self) -> None:
        changes: list[int | None] = []
        sync = SegmentSynchronizer(_segments((0, 1), (1, 2)), on_active_change=changes.append)
        sync.play()
        for t in (0.1, 0.5, 1.2, 1.8, 2.5):
            sync.on_time_update(t)

        assert changes == [0, 1, None]
        assert sync.active_index is None

    def test_pause_hides_highlight(self) -> None:
        sync = SegmentSynchronizer(_segments((0, 1)))
        sync.play()
        sync.on_time_update(0.5)
        assert sync.highlighted_index == 0
        sync.pause()
        assert sync.highlighted_index is None
        assert sync.active_index == 0

    def test_ended_clears_state(self) -> None:
        sync = SegmentSynchronizer(_segments((0, 1)))
        sync.play()
        sync.on_time_update(0.5)
        sync.on_ended()
        assert sync.state is PlaybackState.STOPPED
        assert sync.active_index is None

    def test_seek_to_segment_resumes_at_start(self) -> None:
        changes: list[int | None] = []
        sync = SegmentSynchronizer(_segments((0, 1), (1, 2), (2, 3)), changes.append)
        position = sync.seek_to_segment(2)
        assert position == 2
        assert sync.playing
        assert sync.active_index == 2
        assert changes == [2]

    def test_bind_unsubscribes_on_exit(self) -> None:
        player = FakePlayer()
        sync = SegmentSynchronizer(_segments((0, 1)))
        sync.play()
        with sync.bind(player):
            assert player.on_time is not None
            player.on_time(0.5)
            assert sync.active_index == 0
        assert player.on_time is None

    def test_bind_unsubscribes_on_error(self) -> None:
        player = FakePlayer()
        sync = SegmentSynchronizer()
        with pytest.raises(RuntimeError), sync.bind(player):
            raise RuntimeError("teardown")
        assert player.on_ended is None

    def test_replacing_segments_recomputes_active(self) -> None:
        sync = SegmentSynchronizer(_segments((0, 1)))
        sync.play()
        sync.on_time_update(0.5)
        sync.segments = []
        assert sync.active_index is None
