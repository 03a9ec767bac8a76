"""
Pydantic v2 models for the survey backend's JSON payloads.

The backend speaks camelCase; models expose snake_case attributes and
serialise with ``model_dump(by_alias=True)``.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base for all payloads exchanged with the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Role(StrEnum):
    """Account role granted by the backend."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(_WireModel):
    """Authenticated user returned by POST /auth/login."""

    id: int
    username: str
    email: str | None = None
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


# ---------------------------------------------------------------------------
# Surveys
# ---------------------------------------------------------------------------


class QuestionType(StrEnum):
    """Supported question kinds."""

    TEXT = "TEXT"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    RATING = "RATING"
    YES_NO = "YES_NO"
    AUDIO = "AUDIO"


def split_choices(options: str | None) -> list[str]:
    """Split a comma-joined options string into trimmed, non-empty choices."""
    if not options:
        return []
    return [choice.strip() for choice in options.split(",") if choice.strip()]


class QuestionCreate(_WireModel):
    """A question as sent to POST /surveys (the server assigns ids)."""

    question_text: str
    type: QuestionType = QuestionType.TEXT
    options: str | None = None
    audio_data: str | None = None
    audio_mime_type: str | None = None

    @model_validator(mode="after")
    def _audio_pair(self):
        if (self.audio_data is None) != (self.audio_mime_type is None):
            raise ValueError("audioData and audioMimeType must be set together")
        return self

    @property
    def choices(self) -> list[str]:
        return split_choices(self.options)


class Question(QuestionCreate):
    """A question of a fetched survey."""

    id: int


class Survey(_WireModel):
    """A survey as returned by GET /surveys."""

    id: int
    title: str
    description: str | None = None
    questions: list[Question] = Field(default_factory=list)

    @field_validator("questions", mode="before")
    @classmethod
    def _null_questions(cls, value):
        return [] if value is None else value

    @property
    def question_ids(self) -> set[int]:
        return {q.id for q in self.questions}

    def get_question(self, question_id: int) -> Question:
        """Return the question with ``question_id`` or raise KeyError."""
        for question in self.questions:
            if question.id == question_id:
                return question
        raise KeyError(question_id)


class SurveyCreate(_WireModel):
    """POST /surveys request body."""

    title: str
    description: str = ""
    questions: list[QuestionCreate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class AnswerPayload(_WireModel):
    """One answer of a submitted response; values are always strings."""

    question_id: int
    answer_text: str
    audio_mime_type: str | None = None


class ResponsePayload(_WireModel):
    """POST /surveys/{id}/responses request body."""

    answers: list[AnswerPayload] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class QuestionReport(_WireModel):
    """Aggregated answers for a single question."""

    question_text: str
    question_type: QuestionType
    answer_counts: dict[str, int] = Field(default_factory=dict)
    all_answers: list[str] = Field(default_factory=list)
    audio_answers: list[str] = Field(default_factory=list)

    @field_validator("answer_counts", mode="before")
    @classmethod
    def _null_counts(cls, value):
        return {} if value is None else value

    @field_validator("all_answers", "audio_answers", mode="before")
    @classmethod
    def _null_answers(cls, value):
        return [] if value is None else value


class ReportPayload(_WireModel):
    """GET /surveys/{id}/report response."""

    survey_title: str
    total_responses: int = 0
    question_reports: list[QuestionReport] = Field(default_factory=list)
