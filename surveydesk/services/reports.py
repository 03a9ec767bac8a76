"""
Report aggregation - turns a report payload into chart-ready data.

Pure functions: nothing is cached, the views recompute on every render.
"""

import math
from dataclasses import dataclass

from surveydesk.core.models import QuestionReport, QuestionType, ReportPayload

CHART_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE, QuestionType.YES_NO, QuestionType.RATING})

PALETTE = ("#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899")


def _percent(count: int, total: int) -> int:
    """Whole percent of ``count`` in ``total``, rounded half-up."""
    if total <= 0:
        return 0
    return math.floor(count * 100 / total + 0.5)


@dataclass(frozen=True)
class ChartSlice:
    label: str
    count: int
    percent: int
    color: str

    @property
    def pie_label(self) -> str:
        return f"{self.label}: {self.percent}%"


@dataclass(frozen=True)
class ChartAggregate:
    """Counts of a choice-like question, shared by the bar and pie charts."""

    question_text: str
    question_type: QuestionType
    slices: tuple[ChartSlice, ...]

    @property
    def total(self) -> int:
        return sum(s.count for s in self.slices)

    @property
    def bar_series(self) -> list[dict]:
        return [{"name": s.label, "value": s.count} for s in self.slices]

    @property
    def pie_series(self) -> list[dict]:
        return [
            {"name": s.label, "value": s.count, "label": s.pie_label, "color": s.color}
            for s in self.slices
        ]


@dataclass(frozen=True)
class TextAggregate:
    question_text: str
    answers: tuple[str, ...]


@dataclass(frozen=True)
class AudioAggregate:
    """Recorded answers numbered by position, starting at 1."""

    question_text: str
    entries: tuple[tuple[int, str], ...]


QuestionAggregate = ChartAggregate | TextAggregate | AudioAggregate


def aggregate_question(report: QuestionReport) -> QuestionAggregate:
    """Build the renderable aggregate for one question report.

    Raises:
        ValueError: If the question type has no aggregate.
    """
    if report.question_type in CHART_TYPES:
        total = sum(report.answer_counts.values())
        slices = tuple(
            ChartSlice(
                label=str(label),
                count=count,
                percent=_percent(count, total),
                color=PALETTE[idx % len(PALETTE)],
            )
            for idx, (label, count) in enumerate(report.answer_counts.items())
        )
        return ChartAggregate(report.question_text, report.question_type, slices)
    if report.question_type == QuestionType.TEXT:
        return TextAggregate(report.question_text, tuple(report.all_answers))
    if report.question_type == QuestionType.AUDIO:
        entries = tuple(enumerate(report.audio_answers, start=1))
        return AudioAggregate(report.question_text, entries)
    raise ValueError(f"Unsupported question type: {report.question_type}")


def aggregate_report(report: ReportPayload) -> list[QuestionAggregate]:
    """Aggregate every question of ``report`` in order."""
    return [aggregate_question(q) for q in report.question_reports]
