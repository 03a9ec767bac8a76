"""UI utility functions."""

from collections.abc import Callable
from typing import TypeVar

import streamlit as st

from surveydesk.core.config import get_settings
from surveydesk.services.session import SessionController, View
from surveydesk.ui.api_client import get_api_client

T = TypeVar("T")

_CONTROLLER_KEY = "controller"

# Objects that live only as long as their view is shown
_VIEW_SCOPED_KEYS = {
    View.CREATE: ("draft", "draft_q_"),
    View.TAKE: ("answers", "answer_q_"),
}


def get_controller() -> SessionController:
    """Return this browser session's controller, creating it on first use."""
    if _CONTROLLER_KEY not in st.session_state:
        client = get_api_client(get_settings().api_base_url)
        st.session_state[_CONTROLLER_KEY] = SessionController(client)
    return st.session_state[_CONTROLLER_KEY]


def view_scoped(key: str, factory: Callable[[], T]) -> T:
    """Return ``st.session_state[key]``, creating it with ``factory`` if absent."""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def clear_widget_state(prefix: str) -> None:
    """Forget every widget value whose key starts with ``prefix``."""
    for key in [k for k in st.session_state if str(k).startswith(prefix)]:
        del st.session_state[key]


def discard_stale_view_state(current: View) -> None:
    """Drop the draft / answers of views that are no longer shown."""
    for view, (key, widget_prefix) in _VIEW_SCOPED_KEYS.items():
        if view != current and key in st.session_state:
            del st.session_state[key]
            clear_widget_state(widget_prefix)
