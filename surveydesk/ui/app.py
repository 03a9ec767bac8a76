"""
SurveyDesk Streamlit UI - main entry point.

Run with: ``streamlit run surveydesk/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from surveydesk.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (surveydesk/ui/),
# which removes the project root needed for absolute imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import logging  # noqa: E402

import streamlit as st  # noqa: E402

from surveydesk.core.config import get_settings  # noqa: E402
from surveydesk.services.session import SessionController, View  # noqa: E402
from surveydesk.ui.utils import discard_stale_view_state, get_controller  # noqa: E402
from surveydesk.ui.views import RENDERERS  # noqa: E402

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Survey Manager",
    page_icon="\U0001f4cb",
    layout="wide",
)


def _render_navbar(controller: SessionController) -> None:
    state = controller.state
    title_col, home_col, create_col, logout_col = st.columns([6, 1, 1, 1])
    with title_col:
        st.title("Survey Manager")
        st.caption(f"Welcome, {state.user.username} ({state.user.role})")
    with home_col:
        if st.button("Home", use_container_width=True):
            controller.navigate_home()
            st.rerun()
    with create_col:
        if state.is_admin and st.button("Create Survey", use_container_width=True):
            if state.view != View.CREATE:
                controller.navigate_home()
                controller.open_create()
            st.rerun()
    with logout_col:
        if st.button("Logout", type="primary", use_container_width=True):
            controller.logout()
            st.rerun()
    st.divider()


def _render_connection_banner(controller: SessionController) -> None:
    if controller.state.backend_unreachable:
        st.error(
            "**Connection Error:** Cannot connect to the backend server at "
            f"{get_settings().api_base_url}. Please ensure it is running."
        )


controller = get_controller()
view = controller.resolve_view()
discard_stale_view_state(view)

if controller.state.authenticated:
    _render_navbar(controller)
else:
    st.title("Survey Manager")

_render_connection_banner(controller)

if view in (View.LOGIN, View.REGISTER):
    _, center, _ = st.columns([1, 2, 1])
    with center:
        RENDERERS[view](controller)
else:
    RENDERERS[view](controller)
