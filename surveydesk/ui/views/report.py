"""
Report screen - charts for choice questions, cards for text and audio answers.
"""

import streamlit as st

from surveydesk.services.reports import (
    AudioAggregate,
    ChartAggregate,
    TextAggregate,
    aggregate_report,
)
from surveydesk.services.session import SessionController
from surveydesk.ui.components.recorder import render_audio_player


def _bar_spec(aggregate: ChartAggregate) -> dict:
    return {
        "data": {"values": aggregate.bar_series},
        "mark": {"type": "bar", "color": "#3b82f6"},
        "encoding": {
            "x": {"field": "name", "type": "nominal", "sort": None, "title": None},
            "y": {"field": "value", "type": "quantitative", "title": "Responses"},
        },
        "height": 300,
    }


def _pie_spec(aggregate: ChartAggregate) -> dict:
    series = aggregate.pie_series
    return {
        "data": {"values": series},
        "mark": {"type": "arc", "outerRadius": 100},
        "encoding": {
            "theta": {"field": "value", "type": "quantitative"},
            "color": {
                "field": "label",
                "type": "nominal",
                "sort": None,
                "scale": {
                    "domain": [s["label"] for s in series],
                    "range": [s["color"] for s in series],
                },
                "title": None,
            },
            "tooltip": [{"field": "name"}, {"field": "value"}],
        },
        "height": 300,
    }


def _render_chart(aggregate: ChartAggregate) -> None:
    if aggregate.total == 0:
        st.info("No answers yet.")
        return
    bar_col, pie_col = st.columns(2)
    with bar_col:
        st.vega_lite_chart(spec=_bar_spec(aggregate), use_container_width=True)
    with pie_col:
        st.vega_lite_chart(spec=_pie_spec(aggregate), use_container_width=True)


def _render_text(aggregate: TextAggregate) -> None:
    for answer in aggregate.answers:
        with st.container(border=True):
            st.write(answer)


def _render_audio(aggregate: AudioAggregate) -> None:
    st.caption(f"Audio Responses ({len(aggregate.entries)})")
    for position, payload in aggregate.entries:
        with st.container(border=True):
            st.caption(f"Response {position}")
            render_audio_player(payload)


def render_report(controller: SessionController) -> None:
    report = controller.state.active_report

    header, back = st.columns([5, 1])
    with header:
        st.header(report.survey_title)
        st.caption(f"Total Responses: {report.total_responses}")
    with back:
        if st.button("Back to Home", use_container_width=True):
            controller.navigate_home()
            st.rerun()

    for number, aggregate in enumerate(aggregate_report(report), start=1):
        with st.container(border=True):
            st.subheader(f"{number}. {aggregate.question_text}")
            if isinstance(aggregate, ChartAggregate):
                _render_chart(aggregate)
            elif isinstance(aggregate, TextAggregate):
                _render_text(aggregate)
            elif isinstance(aggregate, AudioAggregate):
                _render_audio(aggregate)
