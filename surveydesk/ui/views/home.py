"""
Home screen - the list of available surveys.
"""

import streamlit as st

from surveydesk.core.exceptions import SurveyDeskError
from surveydesk.services.session import SessionController
from surveydesk.ui.components.survey_card import render_survey_grid


def render_home(controller: SessionController) -> None:
    state = controller.state
    header, refresh = st.columns([5, 1])
    with header:
        st.header("Available Surveys")
    with refresh:
        if st.button("Refresh", use_container_width=True):
            controller.refresh_surveys()
            st.rerun()

    if not state.surveys:
        st.info("No surveys available. Connect to the backend to see surveys.")
        return

    pressed = render_survey_grid(state.surveys, is_admin=state.is_admin)
    if pressed is None:
        return

    action, survey_id = pressed
    try:
        if action == "take":
            controller.select_survey(survey_id)
        else:
            with st.spinner("Loading report..."):
                controller.request_report(survey_id)
    except SurveyDeskError as exc:
        st.error(exc.detail)
        return
    st.rerun()
