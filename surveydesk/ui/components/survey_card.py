"""
Survey card display components.
"""

import streamlit as st

from surveydesk.core.models import Survey


def render_survey_card(survey: Survey, is_admin: bool) -> str | None:
    """Render one survey as a card.

    Returns:
        "take" or "report" when the matching button was pressed, else None.
    """
    action = None
    with st.container(border=True):
        st.markdown(f"**{survey.title}**")
        if survey.description:
            st.write(survey.description)
        st.caption(f"{len(survey.questions)} questions")

        columns = st.columns(2 if is_admin else 1)
        with columns[0]:
            if st.button("Take Survey", key=f"take_{survey.id}", use_container_width=True):
                action = "take"
        if is_admin:
            with columns[1]:
                if st.button("Report", key=f"report_{survey.id}", use_container_width=True):
                    action = "report"
    return action


def render_survey_grid(surveys: list[Survey], is_admin: bool, per_row: int = 3) -> tuple[str, int] | None:
    """Render surveys in rows of ``per_row`` cards.

    Returns:
        ``(action, survey_id)`` for the first pressed button, else None.
    """
    pressed = None
    for start in range(0, len(surveys), per_row):
        row = surveys[start : start + per_row]
        for column, survey in zip(st.columns(per_row), row, strict=False):
            with column:
                action = render_survey_card(survey, is_admin)
                if action and pressed is None:
                    pressed = (action, survey.id)
    return pressed
