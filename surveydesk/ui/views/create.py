"""
Survey editor - admins compose a draft question by question.

The draft lives in ``st.session_state["draft"]`` for as long as this view
is shown. Widget keys are positional (``draft_q_<index>_<field>``), so
they are reset whenever a question is removed.
"""

import streamlit as st

from surveydesk.core.exceptions import SurveyDeskError
from surveydesk.core.models import QuestionType
from surveydesk.services.authoring import SurveyDraft
from surveydesk.services.session import SessionController
from surveydesk.ui.components.recorder import render_audio_player, render_recorder
from surveydesk.ui.utils import clear_widget_state, view_scoped

_TYPE_LABELS = {
    QuestionType.TEXT: "Text",
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.RATING: "Rating",
    QuestionType.YES_NO: "Yes/No",
    QuestionType.AUDIO: "Audio Response",
}


def _discard_draft() -> None:
    st.session_state.pop("draft", None)
    clear_widget_state("draft_q_")


def _render_question(draft: SurveyDraft, index: int) -> None:
    question = draft.questions[index]
    prefix = f"draft_q_{index}"

    with st.container(border=True):
        title_col, remove_col = st.columns([5, 1])
        with title_col:
            st.markdown(f"**Question {index + 1}**")
        with remove_col:
            if len(draft) > 1 and st.button("Remove", key=f"{prefix}_remove"):
                try:
                    draft.remove_question(index)
                except SurveyDeskError as exc:
                    st.error(exc.detail)
                    return
                clear_widget_state("draft_q_")
                st.rerun()

        text = st.text_input(
            "Question",
            value=question.question_text,
            placeholder="Enter question",
            key=f"{prefix}_text",
        )
        draft.update_field(index, "question_text", text)

        types = list(_TYPE_LABELS)
        qtype = st.selectbox(
            "Question Type",
            types,
            index=types.index(question.type),
            format_func=_TYPE_LABELS.get,
            key=f"{prefix}_type",
        )
        draft.update_field(index, "type", qtype)

        if qtype == QuestionType.MULTIPLE_CHOICE:
            options = st.text_input(
                "Options (comma-separated) *",
                value=question.options,
                placeholder="Option1,Option2,Option3",
                key=f"{prefix}_options",
            )
            draft.update_field(index, "options", options)

        st.caption("Optional: Add audio to question")
        render_recorder(
            key=f"{prefix}_audio",
            on_complete=lambda payload, mime: draft.update_audio(index, payload, mime),
            label="Record question audio",
            on_clear=lambda: draft.update_audio(index, None, None),
        )
        if question.audio_data:
            render_audio_player(question.audio_data)
            if st.button("Remove audio", key=f"{prefix}_audio_clear"):
                draft.update_audio(index, None, None)
                st.rerun()


def render_create(controller: SessionController) -> None:
    draft: SurveyDraft = view_scoped("draft", SurveyDraft)

    st.header("Create New Survey")
    draft.title = st.text_input("Survey Title *", value=draft.title, placeholder="Enter survey title")
    draft.description = st.text_area(
        "Description", value=draft.description, height=80, placeholder="Enter survey description"
    )

    header, add = st.columns([5, 1])
    with header:
        st.subheader("Questions")
    with add:
        if st.button("Add Question", use_container_width=True):
            draft.add_question()

    for index in range(len(draft)):
        _render_question(draft, index)

    submit_col, cancel_col = st.columns(2)
    with submit_col:
        submitted = st.button("Create Survey", type="primary", use_container_width=True)
    with cancel_col:
        cancelled = st.button("Cancel", use_container_width=True)

    if cancelled:
        _discard_draft()
        controller.navigate_home()
        st.rerun()

    if submitted:
        try:
            with st.spinner("Creating survey..."):
                controller.submit_draft(draft)
        except SurveyDeskError as exc:
            st.error(exc.detail)
            return
        _discard_draft()
        st.toast("Survey created successfully!")
        st.rerun()
