"""
Recorder component - captures a spoken answer and hands back the payload.

The browser records through ``st.audio_input``; the finished file is run
through the capture pipeline once per distinct recording.
"""

import asyncio
import hashlib
import logging
from collections.abc import Callable

import streamlit as st

from surveydesk.core.exceptions import CaptureError
from surveydesk.services.audio import capture_audio, decode_data_uri

logger = logging.getLogger(__name__)


def render_recorder(
    key: str,
    on_complete: Callable[[str, str], None],
    label: str = "Record audio",
    on_clear: Callable[[], None] | None = None,
) -> None:
    """Render a microphone input and call ``on_complete(payload, mime_type)``.

    Args:
        key: Unique widget key.
        on_complete: Receives the encoded recording once it is ready.
        label: Widget label.
        on_clear: Called once when a previously captured recording is deleted
            from the widget.
    """
    audio = st.audio_input(label, key=key)
    seen_key = f"{key}_digest"
    if audio is None:
        if st.session_state.pop(seen_key, None) is not None and on_clear is not None:
            on_clear()
        return

    data = audio.getvalue()
    digest = hashlib.sha256(data).hexdigest()
    if st.session_state.get(seen_key) == digest:
        return

    try:
        with st.spinner("Encoding recording..."):
            asyncio.run(capture_audio(data, mime_type=audio.type or None, on_complete=on_complete))
    except CaptureError as exc:
        logger.warning("Capture failed for %s: %s", key, exc.detail)
        st.error(exc.detail)
        return
    st.session_state[seen_key] = digest


def render_audio_player(payload: str | None) -> None:
    """Play an encoded recording, or show a caption if it cannot be decoded."""
    if not payload:
        return
    try:
        data, mime_type = decode_data_uri(payload)
    except ValueError:
        st.caption("Audio unavailable")
        return
    st.audio(data, format=mime_type.split(";")[0])
