"""
Take-survey screen - one input per question, submitted as a whole.
"""

import streamlit as st

from surveydesk.core.exceptions import SurveyDeskError
from surveydesk.core.models import Question, QuestionType
from surveydesk.services.answers import RATING_SCALE, YES_NO_CHOICES, AnswerCollector
from surveydesk.services.session import SessionController
from surveydesk.ui.components.recorder import render_audio_player, render_recorder
from surveydesk.ui.utils import clear_widget_state, view_scoped


def _choice(label: str, options, key: str):
    """Radio group with nothing preselected."""
    return st.radio(label, list(options), index=None, key=key, horizontal=True)


def _render_input(collector: AnswerCollector, question: Question) -> None:
    key = f"answer_q_{question.id}"

    if question.type == QuestionType.TEXT:
        value = st.text_area("Your answer", key=key, height=80)
        collector.set_answer(question.id, value)
    elif question.type == QuestionType.MULTIPLE_CHOICE:
        value = st.radio("Choose one", question.choices, index=None, key=key)
        if value is not None:
            collector.set_answer(question.id, value)
    elif question.type == QuestionType.RATING:
        value = _choice("Rating", RATING_SCALE, key)
        if value is not None:
            collector.set_answer(question.id, int(value))
    elif question.type == QuestionType.YES_NO:
        value = _choice("Answer", YES_NO_CHOICES, key)
        if value is not None:
            collector.set_answer(question.id, value)
    elif question.type == QuestionType.AUDIO:
        render_recorder(
            key=key,
            on_complete=lambda payload, mime: collector.set_answer(question.id, payload, mime),
            label="Record your answer",
            on_clear=lambda: collector.clear_answer(question.id),
        )
        entry = collector.get(question.id)
        if entry is not None:
            st.caption("Recording saved")
    else:
        st.warning(f"Unsupported question type: {question.type}")


def render_take(controller: SessionController) -> None:
    survey = controller.state.active_survey
    collector: AnswerCollector = view_scoped("answers", lambda: AnswerCollector(survey))
    if collector.survey.id != survey.id:
        clear_widget_state("answer_q_")
        collector = st.session_state["answers"] = AnswerCollector(survey)

    st.header(survey.title)
    if survey.description:
        st.write(survey.description)

    for number, question in enumerate(survey.questions, start=1):
        with st.container(border=True):
            st.markdown(f"**{number}. {question.question_text}**")
            render_audio_player(question.audio_data)
            _render_input(collector, question)

    st.caption(f"Answered {collector.answered_count} of {len(survey.questions)} questions")
    if st.button("Submit Survey", type="primary", use_container_width=True):
        try:
            with st.spinner("Submitting..."):
                controller.submit_answers(collector)
        except SurveyDeskError as exc:
            st.error(exc.detail)
            return
        st.session_state.pop("answers", None)
        clear_widget_state("answer_q_")
        st.toast("Survey submitted successfully!")
        st.rerun()
