"""
Answer collection for a survey being taken.

Answers keep their native type (e.g. an ``int`` rating) while the user is
answering; they are stringified only when the response payload is built.
A question counts as answered as soon as an entry exists for its id.
"""

import logging
from dataclasses import dataclass

from surveydesk.core.exceptions import IncompleteAnswersError, ValidationFailedError
from surveydesk.core.models import (
    AnswerPayload,
    Question,
    QuestionType,
    ResponsePayload,
    Survey,
)

logger = logging.getLogger(__name__)

RATING_SCALE = range(1, 6)
YES_NO_CHOICES = ("Yes", "No")


@dataclass(frozen=True)
class AnswerEntry:
    """The in-progress answer to one question."""

    answer_text: str | int
    audio_mime_type: str | None = None


def validate_answer(question: Question, value, mime_type: str | None = None) -> None:
    """Check ``value`` against the input contract of ``question.type``.

    Raises:
        ValidationFailedError: If the value is not acceptable for the question.
    """
    if mime_type is not None and question.type != QuestionType.AUDIO:
        raise ValidationFailedError("Only audio questions accept recordings")

    if question.type == QuestionType.TEXT:
        if not isinstance(value, str) or not value.strip():
            raise ValidationFailedError("Please enter an answer")
    elif question.type == QuestionType.MULTIPLE_CHOICE:
        if value not in question.choices:
            raise ValidationFailedError("Please select one of the options")
    elif question.type == QuestionType.RATING:
        if isinstance(value, bool) or not isinstance(value, int) or value not in RATING_SCALE:
            raise ValidationFailedError("Please choose a rating from 1 to 5")
    elif question.type == QuestionType.YES_NO:
        if value not in YES_NO_CHOICES:
            raise ValidationFailedError("Please answer Yes or No")
    elif question.type == QuestionType.AUDIO:
        if not isinstance(value, str) or not value.startswith("data:") or mime_type is None:
            raise ValidationFailedError("Please record an answer")
    else:
        raise ValueError(f"Unsupported question type: {question.type}")


class AnswerCollector:
    """Maps question ids of one survey to the user's answers."""

    def __init__(self, survey: Survey) -> None:
        self._survey = survey
        self._answers: dict[int, AnswerEntry] = {}

    @property
    def survey(self) -> Survey:
        return self._survey

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    def set_answer(self, question_id: int, value, mime_type: str | None = None) -> None:
        """Record the answer to ``question_id``, replacing any previous one.

        A blank value for a TEXT question clears its answer instead.

        Raises:
            KeyError: If the question is not part of the survey.
            ValidationFailedError: If ``value`` breaks the question's input contract.
        """
        question = self._survey.get_question(question_id)
        if question.type == QuestionType.TEXT and isinstance(value, str) and not value.strip():
            self.clear_answer(question_id)
            return
        validate_answer(question, value, mime_type)
        self._answers[question_id] = AnswerEntry(answer_text=value, audio_mime_type=mime_type)

    def clear_answer(self, question_id: int) -> None:
        self._answers.pop(question_id, None)

    def get(self, question_id: int) -> AnswerEntry | None:
        return self._answers.get(question_id)

    def is_answered(self, question_id: int) -> bool:
        return question_id in self._answers

    def missing(self) -> list[Question]:
        """Questions of the survey that have no answer yet."""
        return [q for q in self._survey.questions if q.id not in self._answers]

    def build_payload(self) -> ResponsePayload:
        """Project the answers into the wire payload.

        Raises:
            IncompleteAnswersError: If any question of the survey is unanswered.
        """
        missing = self.missing()
        if missing:
            raise IncompleteAnswersError(len(missing))

        answers = []
        for question in self._survey.questions:
            entry = self._answers[question.id]
            answers.append(
                AnswerPayload(
                    question_id=question.id,
                    answer_text=str(entry.answer_text),
                    audio_mime_type=entry.audio_mime_type,
                )
            )
        logger.debug("Built response with %d answer(s)", len(answers))
        return ResponsePayload(answers=answers)
