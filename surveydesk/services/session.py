"""
Session controller - the client-side view-state machine.

Views: login <-> register -> home -> {create, take, report} -> home

The controller owns one ``SessionState`` and is the only code that mutates
it. Every transition either completes (after its backend request has
resolved) or raises a ``SurveyDeskError`` leaving the state untouched,
apart from the sticky ``backend_unreachable`` flag.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from surveydesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConnectivityError,
    RequestRejectedError,
    SurveyDeskError,
    ValidationFailedError,
)
from surveydesk.core.models import ReportPayload, Survey, User
from surveydesk.services.answers import AnswerCollector
from surveydesk.services.authoring import SurveyDraft

if TYPE_CHECKING:
    from surveydesk.ui.api_client import APIClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class View(StrEnum):
    """Every screen of the application."""

    LOGIN = "login"
    REGISTER = "register"
    HOME = "home"
    CREATE = "create"
    TAKE = "take"
    REPORT = "report"


PUBLIC_VIEWS = frozenset({View.LOGIN, View.REGISTER})
ADMIN_VIEWS = frozenset({View.CREATE, View.REPORT})


@dataclass
class SessionState:
    """Everything that outlives a single view."""

    view: View = View.LOGIN
    user: User | None = None
    surveys: list[Survey] = field(default_factory=list)
    active_survey: Survey | None = None
    active_report: ReportPayload | None = None
    backend_unreachable: bool = False

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin


class SessionController:
    """Drives view transitions and dispatches to the backend.

    Args:
        client: Backend API client.
        state: Existing state to continue (a fresh one by default).
    """

    def __init__(self, client: "APIClient", state: SessionState | None = None) -> None:
        self._client = client
        self._state = state or SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    # -- internals --

    def _call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Run one backend request, latching the unreachable flag."""
        try:
            result = fn(*args, **kwargs)
        except ConnectivityError:
            self._state.backend_unreachable = True
            raise
        self._state.backend_unreachable = False
        return result

    @staticmethod
    def _parse(model: type[M], data) -> M:
        """Validate a backend payload, mapping malformed bodies to a rejection."""
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.warning("Malformed %s payload: %s", model.__name__, exc)
            raise RequestRejectedError("Unexpected response from backend", 502) from None

    def _require_user(self) -> User:
        if self._state.user is None:
            raise AuthorizationError("Please log in first")
        return self._state.user

    def _require_admin(self, detail: str) -> User:
        user = self._require_user()
        if not user.is_admin:
            logger.warning("Refused admin-only action for %s: %s", user.username, detail)
            raise AuthorizationError(detail)
        return user

    def _require_home(self, detail: str) -> None:
        if self._state.view != View.HOME:
            raise ValidationFailedError(detail)

    def _enter(self, view: View) -> None:
        logger.info("View %s -> %s", self._state.view, view)
        self._state.view = view

    # -- unauthenticated --

    def show_register(self) -> None:
        if not self._state.authenticated:
            self._enter(View.REGISTER)

    def show_login(self) -> None:
        if not self._state.authenticated:
            self._enter(View.LOGIN)

    def register(self, username: str, email: str, password: str, admin: bool = False) -> None:
        """Create an account and return to the login view.

        Raises:
            ValidationFailedError: If any field is blank.
            SurveyDeskError: If the backend rejects the registration.
        """
        if not username or not email or not password:
            raise ValidationFailedError("Please fill in all fields")
        try:
            self._call(self._client.register, username, email, password, admin=admin)
        except AuthorizationError as exc:
            raise RequestRejectedError(exc.detail or "Registration failed", 403) from None
        self._enter(View.LOGIN)

    def login(self, username: str, password: str) -> User:
        """Authenticate and enter the home view.

        Raises:
            ValidationFailedError: If a field is blank.
            AuthenticationError: If the backend rejects the credentials.
            ConnectivityError: If the backend cannot be reached.
        """
        if not username or not password:
            raise ValidationFailedError("Please fill in all fields")
        try:
            data = self._call(self._client.login, username, password)
        except (AuthorizationError, RequestRejectedError):
            raise AuthenticationError() from None

        user = self._parse(User, data)
        self._state.user = user
        self._state.surveys = []
        self._state.active_survey = None
        self._state.active_report = None
        self._enter(View.HOME)
        logger.info("Logged in as %s (%s)", user.username, user.role)
        self.refresh_surveys()
        return user

    # -- authenticated --

    def refresh_surveys(self) -> bool:
        """Re-fetch the survey list.

        Failures are logged and leave the held list in place; a connectivity
        failure latches ``backend_unreachable``.

        Returns:
            True if the list was refreshed.
        """
        self._require_user()
        try:
            data = self._call(self._client.list_surveys)
            surveys = [self._parse(Survey, item) for item in data]
        except SurveyDeskError as exc:
            logger.warning("Could not fetch surveys: %s", exc.detail)
            return False
        self._state.surveys = surveys
        return True

    def navigate_home(self) -> None:
        self._require_user()
        self._state.active_survey = None
        self._state.active_report = None
        self._enter(View.HOME)

    def select_survey(self, survey_id: int) -> Survey:
        """Start taking the survey with ``survey_id``.

        Raises:
            KeyError: If no held survey has that id.
        """
        self._require_user()
        self._require_home("Surveys can only be opened from the home screen")
        survey = next((s for s in self._state.surveys if s.id == survey_id), None)
        if survey is None:
            raise KeyError(survey_id)
        self._state.active_report = None
        self._state.active_survey = survey
        self._enter(View.TAKE)
        return survey

    def open_create(self) -> None:
        self._require_admin("Only admins can create surveys")
        self._require_home("The editor can only be opened from the home screen")
        self._state.active_survey = None
        self._state.active_report = None
        self._enter(View.CREATE)

    def request_report(self, survey_id: int) -> ReportPayload:
        """Fetch the report of ``survey_id`` and enter the report view.

        Raises:
            AuthorizationError: If the user is not an admin or the backend refuses.
        """
        user = self._require_admin("Only admins can view reports")
        self._require_home("Reports can only be opened from the home screen")
        try:
            data = self._call(self._client.get_report, survey_id, user.id)
        except (AuthorizationError, RequestRejectedError):
            raise AuthorizationError("Only admins can view reports") from None

        report = self._parse(ReportPayload, data)
        self._state.active_survey = None
        self._state.active_report = report
        self._enter(View.REPORT)
        return report

    def submit_draft(self, draft: SurveyDraft) -> None:
        """Validate and create the drafted survey, then return home.

        Raises:
            ValidationFailedError: If the draft is incomplete (nothing is sent).
            AuthorizationError: If the backend refuses the survey.
        """
        user = self._require_admin("Only admins can create surveys")
        if self._state.view != View.CREATE:
            raise ValidationFailedError("Surveys can only be created from the editor")
        body = draft.build()
        try:
            self._call(
                self._client.create_survey,
                user.id,
                body.model_dump(mode="json", by_alias=True),
            )
        except (AuthorizationError, RequestRejectedError):
            raise AuthorizationError("Only admins can create surveys") from None

        logger.info("Survey %r created", body.title)
        self._enter(View.HOME)
        self.refresh_surveys()

    def submit_answers(self, collector: AnswerCollector) -> None:
        """Submit the collected answers of the active survey, then return home.

        Raises:
            IncompleteAnswersError: If any question is unanswered (nothing is sent).
            RequestRejectedError: If the backend refuses the response.
        """
        user = self._require_user()
        survey = self._state.active_survey
        if self._state.view != View.TAKE or survey is None:
            raise ValidationFailedError("No survey is being taken")
        if collector.survey.id != survey.id:
            raise ValidationFailedError("These answers belong to a different survey")

        payload = collector.build_payload()
        try:
            self._call(
                self._client.submit_response,
                survey.id,
                user.id,
                payload.model_dump(mode="json", by_alias=True),
            )
        except AuthorizationError as exc:
            raise RequestRejectedError(exc.detail or "Failed to submit survey", 403) from None

        logger.info("Submitted %d answer(s) to survey %d", len(payload.answers), survey.id)
        self._state.active_survey = None
        self._enter(View.HOME)

    def logout(self) -> None:
        """Tear down the session unconditionally."""
        if self._state.user is not None:
            logger.info("Logged out %s", self._state.user.username)
        self._state.user = None
        self._state.surveys = []
        self._state.active_survey = None
        self._state.active_report = None
        self._enter(View.LOGIN)

    # -- rendering --

    def resolve_view(self) -> View:
        """Return the view the shell may render for the current state."""
        state = self._state
        if not state.authenticated:
            return state.view if state.view in PUBLIC_VIEWS else View.LOGIN
        if state.view in PUBLIC_VIEWS:
            return View.HOME
        if state.view in ADMIN_VIEWS and not state.is_admin:
            return View.HOME
        if state.view == View.TAKE and state.active_survey is None:
            return View.HOME
        if state.view == View.REPORT and state.active_report is None:
            return View.HOME
        return state.view
