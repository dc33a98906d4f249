"""Browser-side playback sync for the Streamlit player.

Streamlit's media elements never report their position back to Python, so
the follow-along loop runs in the page: a small script subscribes to the
rendered ``<audio>``/``<video>`` element, applies the same first-match rule
as :func:`src.session.synchronizer.active_segment_index`, highlights the
active row and scrolls it into view.  The subscription is released when the
component frame is torn down.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from src.transcript.models import Segment

ROW_ID = "seg-{index}"
TRANSLATION_ROW_ID = "seg-ja-{index}"
HIGHLIGHT_STYLE = "background:#fef9c3;font-weight:bold;"

# Events that move the playhead, start or stop playback
PLAYER_EVENTS = ("timeupdate", "seeked", "play", "pause", "ended")

_SCRIPT = """
<div style="display:flex;gap:0.5rem;font-family:sans-serif">
  <button id="play">Play</button>
  <button id="pause">Pause</button>
</div>
<script>
const bounds = __BOUNDS__;
const seekTo = __SEEK_TO__;
const doc = window.parent.document;
let active = __ACTIVE__;
let media = null;
let unsubscribe = null;

function activeIndex(t) {
  for (let i = 0; i < bounds.length; i++) {
    if (bounds[i][0] <= t && t < bounds[i][1]) return i;
  }
  return null;
}

function mark(i, on) {
  for (const id of ["seg-" + i, "seg-ja-" + i]) {
    const el = doc.getElementById(id);
    if (el) el.setAttribute("style", on ? "__STYLE__" : "");
  }
}

function setActive(i) {
  if (i === active) return;
  if (active !== null) mark(active, false);
  active = i;
  if (i === null) return;
  mark(i, true);
  const row = doc.getElementById("seg-" + i);
  if (row) row.scrollIntoView({behavior: "smooth", block: "center"});
}

function follow() {
  setActive(media.paused || media.ended ? null : activeIndex(media.currentTime));
}

function subscribe(el) {
  for (const type of __EVENTS__) el.addEventListener(type, follow);
  return () => {
    for (const type of __EVENTS__) el.removeEventListener(type, follow);
  };
}

function attach() {
  const found = doc.querySelectorAll("audio, video");
  if (!found.length) return false;
  media = found[found.length - 1];
  unsubscribe = subscribe(media);
  if (active !== null) mark(active, true);
  if (seekTo !== null) {
    media.currentTime = seekTo;
    media.play().catch(() => follow());
  }
  return true;
}

document.getElementById("play").onclick = () => media && media.play();
document.getElementById("pause").onclick = () => media && media.pause();
window.addEventListener("pagehide", () => unsubscribe && unsubscribe());

if (!attach()) {
  const poll = setInterval(() => { if (attach()) clearInterval(poll); }, 200);
}
const token = __TOKEN__;
</script>
"""


def segment_bounds(segments: Sequence[Segment]) -> list[list[float]]:
    """``[start, end]`` pairs in segment order."""
    return [[float(s.start), float(s.end)] for s in segments]


def sync_script(
    segments: Sequence[Segment],
    *,
    active: int | None = None,
    seek_to: float | None = None,
    token: str = "",
) -> str:
    """HTML for ``components.html`` that follows the page's media element.

    Args:
        segments: Timed segments whose rows carry ``seg-{i}``/``seg-ja-{i}`` ids.
        active: Row already highlighted by the server render, if any.
        seek_to: Exact position (seconds) to jump to and resume from.
        token: Changes whenever the media or a seek changes so Streamlit
            remounts the frame and re-subscribes.
    """
    return (
        _SCRIPT.replace("__BOUNDS__", json.dumps(segment_bounds(segments)))
        .replace("__SEEK_TO__", json.dumps(seek_to))
        .replace("__ACTIVE__", json.dumps(active))
        .replace("__EVENTS__", json.dumps(list(PLAYER_EVENTS)))
        .replace("__STYLE__", HIGHLIGHT_STYLE)
        .replace("__TOKEN__", json.dumps(token).replace("<", "\\u003c"))
    )
