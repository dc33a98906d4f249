"""Bilingual Transcript Player -- Streamlit UI.

Upload audio/video (or a saved transcript), transcribe it, translate each
segment to Japanese, and follow along with the playing media.
"""

from __future__ import annotations

import html

import streamlit as st
import streamlit.components.v1 as components

from src.config import settings
from src.logging_setup import configure_logging
from src.providers import (
    DEFAULT_ENDPOINT,
    DEFAULT_OLLAMA_ENDPOINT,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_TRANSCRIBE_MODEL,
    DEFAULT_TRANSLATE_MODEL,
    TranslationEngine,
)
from src.session.config_store import SessionConfigStore
from src.session.controller import TranscriptSession
from src.session.synchronizer import SegmentSynchronizer
from src.transcript.files import DOWNLOAD_FILENAME
from src.ui.api_client import GatewayClient
from src.ui.player import HIGHLIGHT_STYLE, ROW_ID, TRANSLATION_ROW_ID, sync_script

ENGINE_LABELS = {
    TranslationEngine.OPENAI: "OpenAI-compatible",
    TranslationEngine.OLLAMA: "Local model (Ollama)",
    TranslationEngine.GOOGLE: "Google Translate",
}

configure_logging(settings.log_level)

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Bilingual Transcript Player", layout="wide")

store = SessionConfigStore(st.session_state)


@st.cache_resource
def get_gateway() -> GatewayClient:
    return GatewayClient()


gateway = get_gateway()

if "session" not in st.session_state:
    st.session_state.session = TranscriptSession(gateway, store.load())
    st.session_state.synchronizer = SegmentSynchronizer()
    st.session_state.seek_to = None
    st.session_state.seek_count = 0
    st.session_state.upload_nonce = 0

session: TranscriptSession = st.session_state.session
sync: SegmentSynchronizer = st.session_state.synchronizer


def _seek(index: int) -> None:
    st.session_state.seek_to = sync.seek_to_segment(index)
    st.session_state.seek_count += 1


# ---------------------------------------------------------------------------
# Sidebar -- engine selector, provider settings, API status
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Transcript Player")
    st.markdown("---")

    config = store.load()
    engine_value: str = st.selectbox(
        "Translation engine",
        options=[e.value for e in TranslationEngine],
        index=[e.value for e in TranslationEngine].index(config.engine.value),
        format_func=lambda v: ENGINE_LABELS[TranslationEngine(v)],
    )
    config.engine = TranslationEngine(engine_value)

    with st.expander("Provider settings"):
        st.caption("Blank fields fall back to the server environment.")
        st.markdown("**Transcription**")
        config.transcribe.api_key = st.text_input(
            "API key", value=config.transcribe.api_key or "", type="password", key="tr_key"
        )
        config.transcribe.endpoint = st.text_input(
            "Endpoint", value=config.transcribe.endpoint or "", placeholder=DEFAULT_ENDPOINT,
            key="tr_endpoint",
        )
        config.transcribe.model_name = st.text_input(
            "Model", value=config.transcribe.model_name or "",
            placeholder=DEFAULT_TRANSCRIBE_MODEL, key="tr_model",
        )

        st.markdown("**OpenAI-compatible translation**")
        config.openai.api_key = st.text_input(
            "API key", value=config.openai.api_key or "", type="password", key="oa_key"
        )
        config.openai.endpoint = st.text_input(
            "Endpoint", value=config.openai.endpoint or "", placeholder=DEFAULT_ENDPOINT,
            key="oa_endpoint",
        )
        config.openai.model_name = st.text_input(
            "Model", value=config.openai.model_name or "",
            placeholder=DEFAULT_TRANSLATE_MODEL, key="oa_model",
        )

        st.markdown("**Local model translation**")
        config.ollama.api_key = st.text_input(
            "API key (optional)", value=config.ollama.api_key or "", type="password", key="ol_key"
        )
        config.ollama.endpoint = st.text_input(
            "Endpoint", value=config.ollama.endpoint or "",
            placeholder=DEFAULT_OLLAMA_ENDPOINT, key="ol_endpoint",
        )
        config.ollama.model_name = st.text_input(
            "Model", value=config.ollama.model_name or "",
            placeholder=DEFAULT_OLLAMA_MODEL, key="ol_model",
        )

        if st.button("Reset to defaults"):
            for key in ("tr_key", "tr_endpoint", "tr_model", "oa_key", "oa_endpoint",
                        "oa_model", "ol_key", "ol_endpoint", "ol_model"):
                st.session_state.pop(key, None)
            session.config = store.reset()
            st.rerun()

    store.save(config)
    session.config = config

    st.markdown("---")
    if gateway.check_health():
        st.markdown(":green_circle: Gateway connected")
    else:
        st.markdown(":red_circle: Gateway unreachable")

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------
st.header("Bilingual Transcript Player")

col_media, col_text, col_run = st.columns(3)
with col_media:
    media_upload = st.file_uploader(
        "Audio / video file", key=f"media_upload_{st.session_state.upload_nonce}"
    )
with col_text:
    text_upload = st.file_uploader(
        "Transcript file", type=["txt"], key=f"text_upload_{st.session_state.upload_nonce}"
    )

if media_upload is not None and (
    session.media is None or session.media.name != media_upload.name
):
    session.select_media(media_upload.name, media_upload.getvalue(), media_upload.type)

rows_placeholder = st.empty()


def _render_rows(interactive: bool = True) -> None:
    """Two-column English/Japanese transcript, active row highlighted.

    Seek buttons are only drawn on the final render of a run; progress
    redraws during translation would otherwise repeat their widget keys.
    """
    rows = session.rows()
    with rows_placeholder.container():
        if not rows:
            return
        head_en, head_ja, _ = st.columns([5, 5, 1])
        head_en.markdown("**English**")
        head_ja.markdown("**Japanese**")
        highlighted = sync.highlighted_index
        for idx, (english, japanese) in enumerate(rows):
            col_en, col_ja, col_seek = st.columns([5, 5, 1])
            style = HIGHLIGHT_STYLE if idx == highlighted else ""
            col_en.markdown(
                f'<div id="{ROW_ID.format(index=idx)}" style="{style}">'
                f"{html.escape(english)}</div>",
                unsafe_allow_html=True,
            )
            col_ja.markdown(
                f'<div id="{TRANSLATION_ROW_ID.format(index=idx)}" style="{style}">'
                f"{html.escape(japanese)}</div>",
                unsafe_allow_html=True,
            )
            if interactive and session.segments and session.media is not None:
                col_seek.button("▶", key=f"seek-{idx}", on_click=_seek, args=(idx,))


def _on_progress(segments: list) -> None:
    sync.segments = segments
    _render_rows(interactive=False)


session.on_update = _on_progress

if text_upload is not None and (
    session.transcript_file is None or session.transcript_file.name != text_upload.name
):
    with st.spinner("Translating..."):
        session.load_transcript_file(text_upload.name, text_upload.getvalue())
    sync.segments = session.segments

with col_run:
    run_clicked = st.button(
        "Transcribe & translate",
        disabled=session.media is None and session.transcript_file is None,
        type="primary",
    )
    clear_clicked = st.button("Clear")

if clear_clicked:
    session.clear()
    sync.segments = []
    sync.on_ended()
    st.session_state.upload_nonce += 1  # fresh uploaders drop the selected files
    st.rerun()

if run_clicked:
    with st.spinner("Transcribing..." if session.transcript_file is None else "Translating..."):
        session.run()
    sync.segments = session.segments

if session.error:
    st.error(session.error)

# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------
if session.media is not None:
    if session.media.is_video:
        st.video(session.media.data)
    else:
        st.audio(session.media.data, format=session.media.mime_type or "audio/wav")

    st.download_button(
        "Download transcript",
        data=session.download(),
        file_name=DOWNLOAD_FILENAME,
        mime="text/plain",
        disabled=not session.segments,
    )

_render_rows()

if session.media is not None:
    components.html(
        sync_script(
            sync.segments,
            active=sync.highlighted_index,
            seek_to=st.session_state.seek_to,
            token=f"{session.media.name}:{len(sync.segments)}:{st.session_state.seek_count}",
        ),
        height=45,
    )
    # The page script follows playback from here until the next seek
    st.session_state.seek_to = None
    sync.pause()
