"""
SurveyDesk exception hierarchy.

All client-side failures inherit from SurveyDeskError so the Streamlit
views can surface any of them with a single ``except`` clause. Every
failure is terminal for the triggering action only.
"""

from datetime import UTC, datetime


class SurveyDeskError(Exception):
    """Base exception for all SurveyDesk errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SURVEYDESK_ERROR",
    ) -> None:
        self.detail = detail
        self.code = code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class ConnectivityError(SurveyDeskError):
    """Raised when a request could not reach the backend.

    Categories: "connection", "timeout", "network".
    """

    def __init__(self, detail: str, category: str = "connection") -> None:
        self.category = category
        super().__init__(detail=detail, code="BACKEND_UNREACHABLE")


class AuthorizationError(SurveyDeskError):
    """Raised when an action is refused because of the user's role."""

    def __init__(self, detail: str = "You are not allowed to do this") -> None:
        super().__init__(detail=detail, code="NOT_AUTHORIZED")


class AuthenticationError(SurveyDeskError):
    """Raised when the backend rejects a login attempt."""

    def __init__(self, detail: str = "Invalid credentials") -> None:
        super().__init__(detail=detail, code="INVALID_CREDENTIALS")


class RequestRejectedError(SurveyDeskError):
    """Raised when the backend answers with a non-success status."""

    def __init__(self, detail: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(detail=detail, code="REQUEST_REJECTED")


class ValidationFailedError(SurveyDeskError):
    """Raised before dispatch when a draft or answer set is incomplete."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="VALIDATION_FAILED")


class IncompleteAnswersError(ValidationFailedError):
    """Raised when a survey is submitted with unanswered questions."""

    def __init__(self, missing: int) -> None:
        self.missing = missing
        super().__init__(f"Please answer all questions. Missing {missing} answer(s).")


class CaptureError(SurveyDeskError):
    """Raised when the microphone is denied/unavailable or encoding fails."""

    def __init__(
        self, detail: str = "Unable to access microphone. Please grant permission."
    ) -> None:
        super().__init__(detail=detail, code="CAPTURE_FAILED")


class CaptureAlreadyActiveError(SurveyDeskError):
    """Raised when trying to start a capture while one is already running."""

    def __init__(self) -> None:
        super().__init__(detail="A recording is already active", code="CAPTURE_ALREADY_ACTIVE")
