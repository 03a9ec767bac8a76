"""
Survey authoring model.

A ``SurveyDraft`` holds the questions of a survey being created. Entries are
addressed by position and edited in place; the server assigns ids on submit.
"""

import logging
from dataclasses import dataclass, field

from surveydesk.core.exceptions import ValidationFailedError
from surveydesk.core.models import QuestionCreate, QuestionType, SurveyCreate, split_choices

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"question_text", "type", "options"})


@dataclass
class DraftQuestion:
    """One question entry of a draft."""

    question_text: str = ""
    type: QuestionType = QuestionType.TEXT
    options: str = ""
    audio_data: str | None = None
    audio_mime_type: str | None = None

    def to_create(self) -> QuestionCreate:
        options = self.options.strip()
        return QuestionCreate(
            question_text=self.question_text.strip(),
            type=self.type,
            options=options or None,
            audio_data=self.audio_data,
            audio_mime_type=self.audio_mime_type,
        )


@dataclass
class SurveyDraft:
    """In-progress survey definition; always holds at least one question."""

    title: str = ""
    description: str = ""
    questions: list[DraftQuestion] = field(default_factory=lambda: [DraftQuestion()])

    def __len__(self) -> int:
        return len(self.questions)

    def add_question(self) -> int:
        """Append a blank question and return its index."""
        self.questions.append(DraftQuestion())
        return len(self.questions) - 1

    def update_field(self, index: int, field_name: str, value) -> None:
        """Set one editable field of the question at ``index``.

        Raises:
            IndexError: If ``index`` is out of range.
            ValueError: If ``field_name`` is not editable or ``type`` is unknown.
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Field is not editable: {field_name}")
        question = self.questions[index]
        if field_name == "type":
            value = QuestionType(value)
        setattr(question, field_name, value)

    def update_audio(self, index: int, payload: str | None, mime_type: str | None) -> None:
        """Attach a capture result to the question at ``index``.

        Passing ``(None, None)`` removes the audio.
        """
        if (payload is None) != (mime_type is None):
            raise ValueError("Audio payload and MIME type must be set together")
        question = self.questions[index]
        question.audio_data = payload
        question.audio_mime_type = mime_type

    def remove_question(self, index: int) -> None:
        """Remove the question at ``index``.

        Raises:
            ValidationFailedError: If it is the last remaining question.
        """
        if len(self.questions) <= 1:
            raise ValidationFailedError("Survey must have at least one question")
        del self.questions[index]

    def validate(self) -> None:
        """Check the draft before submission; the first failing rule wins."""
        if not self.title.strip():
            raise ValidationFailedError("Please enter a survey title")
        if any(not q.question_text.strip() for q in self.questions):
            raise ValidationFailedError("Please fill in all question texts")
        if any(
            q.type == QuestionType.MULTIPLE_CHOICE and not split_choices(q.options)
            for q in self.questions
        ):
            raise ValidationFailedError(
                "Please provide options for all multiple choice questions"
            )

    def build(self) -> SurveyCreate:
        """Validate and project the draft into the POST /surveys body."""
        self.validate()
        logger.debug("Building survey %r with %d question(s)", self.title, len(self))
        return SurveyCreate(
            title=self.title.strip(),
            description=self.description.strip(),
            questions=[q.to_create() for q in self.questions],
        )
