"""Tests for SessionController (view-state machine).

Covers login/logout, the admin guard on CREATE and REPORT, the sticky
backend-unreachable flag, and the end-to-end scenarios of creating a
survey, taking one, and requesting a report.
"""

import copy

import pytest

from surveydesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConnectivityError,
    IncompleteAnswersError,
    RequestRejectedError,
    ValidationFailedError,
)
from surveydesk.services.answers import AnswerCollector
from surveydesk.services.authoring import SurveyDraft
from surveydesk.services.session import SessionController, View


@pytest.fixture
def controller(mock_client):
    return SessionController(mock_client)


@pytest.fixture
def admin(controller):
    """Controller logged in as an admin, on HOME."""
    controller.login("alice", "secret")
    return controller


@pytest.fixture
def regular(controller, mock_client, user_payload):
    """Controller logged in as a regular user, on HOME."""
    mock_client.login.return_value = user_payload
    controller.login("bob", "secret")
    return controller


class TestLogin:
    """Verify login transitions and the survey fetch side effect."""

    def test_admin_login_enters_home_with_surveys(self, controller, mock_client):
        user = controller.login("alice", "secret")

        assert user.is_admin
        assert controller.state.view == View.HOME
        assert [s.id for s in controller.state.surveys] == [10]
        mock_client.list_surveys.assert_called_once()

    def test_rejected_login_keeps_state(self, controller, mock_client):
        mock_client.login.side_effect = RequestRejectedError("Unauthorized", 401)

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            controller.login("alice", "wrong")

        assert controller.state.view == View.LOGIN
        assert controller.state.user is None
        mock_client.list_surveys.assert_not_called()

    def test_blank_fields_never_sent(self, controller, mock_client):
        with pytest.raises(ValidationFailedError, match="fill in all fields"):
            controller.login("alice", "")

        mock_client.login.assert_not_called()

    def test_unreachable_backend_sets_flag(self, controller, mock_client):
        mock_client.login.side_effect = ConnectivityError("down")

        with pytest.raises(ConnectivityError):
            controller.login("alice", "secret")

        assert controller.state.backend_unreachable is True
        assert controller.state.view == View.LOGIN

    def test_survey_fetch_failure_keeps_user_logged_in(self, controller, mock_client):
        mock_client.list_surveys.side_effect = ConnectivityError("down")

        controller.login("alice", "secret")

        assert controller.state.view == View.HOME
        assert controller.state.surveys == []
        assert controller.state.backend_unreachable is True

    def test_relogin_drops_previous_users_surveys(self, admin, mock_client, user_payload):
        mock_client.login.return_value = user_payload
        mock_client.list_surveys.side_effect = ConnectivityError("down")

        admin.login("bob", "secret")

        assert admin.state.user.username == "bob"
        assert admin.state.surveys == []


class TestUnreachableFlag:
    """Verify the flag latches until a request succeeds."""

    def test_cleared_by_next_successful_request(self, admin, mock_client):
        mock_client.list_surveys.side_effect = ConnectivityError("down")
        assert admin.refresh_surveys() is False
        assert admin.state.backend_unreachable is True
        assert [s.id for s in admin.state.surveys] == [10]  # held data kept

        mock_client.list_surveys.side_effect = None
        assert admin.refresh_surveys() is True
        assert admin.state.backend_unreachable is False

    def test_kept_through_rejected_report(self, admin, mock_client):
        mock_client.list_surveys.side_effect = ConnectivityError("down")
        admin.refresh_surveys()
        mock_client.get_report.side_effect = AuthorizationError("Forbidden")

        with pytest.raises(AuthorizationError):
            admin.request_report(10)

        assert admin.state.backend_unreachable is True

    def test_kept_through_rejected_login(self, controller, mock_client):
        mock_client.login.side_effect = ConnectivityError("down")
        with pytest.raises(ConnectivityError):
            controller.login("alice", "secret")

        mock_client.login.side_effect = RequestRejectedError("Unauthorized", 401)
        with pytest.raises(AuthenticationError):
            controller.login("alice", "wrong")

        assert controller.state.backend_unreachable is True


class TestMalformedPayload:
    """Bodies that fail model validation surface as a rejected request."""

    @pytest.fixture
    def broken_survey(self, survey_payload):
        payload = copy.deepcopy(survey_payload)
        payload["questions"][4]["audioData"] = ""
        payload["questions"][4]["audioMimeType"] = None
        return payload

    def test_login_with_malformed_user(self, controller, mock_client):
        mock_client.login.return_value = {"id": "not-a-number"}

        with pytest.raises(RequestRejectedError, match="Unexpected response"):
            controller.login("alice", "secret")

        assert controller.state.view == View.LOGIN
        assert controller.state.user is None

    def test_login_with_malformed_survey_list(self, controller, mock_client, broken_survey):
        mock_client.list_surveys.return_value = [broken_survey]

        controller.login("alice", "secret")

        assert controller.state.view == View.HOME
        assert controller.state.surveys == []

    def test_refresh_keeps_held_list(self, admin, mock_client, broken_survey):
        mock_client.list_surveys.return_value = [broken_survey]

        assert admin.refresh_surveys() is False
        assert [s.id for s in admin.state.surveys] == [10]

    def test_malformed_report(self, admin, mock_client):
        mock_client.get_report.return_value = {"totalResponses": 3}

        with pytest.raises(RequestRejectedError, match="Unexpected response"):
            admin.request_report(10)

        assert admin.state.view == View.HOME
        assert admin.state.active_report is None


class TestRegister:
    """Verify registration returns to the login view."""

    def test_register_admin(self, controller, mock_client):
        controller.show_register()
        assert controller.state.view == View.REGISTER

        controller.register("carol", "carol@example.com", "pw", admin=True)

        mock_client.register.assert_called_once_with(
            "carol", "carol@example.com", "pw", admin=True
        )
        assert controller.state.view == View.LOGIN

    def test_rejection_surfaces_backend_message(self, controller, mock_client):
        mock_client.register.side_effect = RequestRejectedError("Username taken", 400)
        controller.show_register()

        with pytest.raises(RequestRejectedError, match="Username taken"):
            controller.register("carol", "carol@example.com", "pw")

        assert controller.state.view == View.REGISTER


class TestAdminGuard:
    """CREATE and REPORT are never entered by non-admins."""

    def test_open_create_refused(self, regular):
        with pytest.raises(AuthorizationError):
            regular.open_create()
        assert regular.state.view == View.HOME

    def test_report_refused_without_request(self, regular, mock_client):
        with pytest.raises(AuthorizationError):
            regular.request_report(10)

        mock_client.get_report.assert_not_called()
        assert regular.state.view == View.HOME
        assert regular.state.active_report is None

    def test_backend_rejection_of_report(self, admin, mock_client):
        mock_client.get_report.side_effect = AuthorizationError("Forbidden")

        with pytest.raises(AuthorizationError, match="Only admins can view reports"):
            admin.request_report(10)

        assert admin.state.view == View.HOME
        assert admin.state.active_report is None

    def test_admin_views_entered_from_home_only(self, admin, mock_client):
        admin.select_survey(10)

        with pytest.raises(ValidationFailedError):
            admin.open_create()
        with pytest.raises(ValidationFailedError):
            admin.request_report(10)

        mock_client.get_report.assert_not_called()
        assert admin.state.view == View.TAKE

    def test_stale_admin_view_resolves_home(self, regular):
        regular.state.view = View.CREATE
        assert regular.resolve_view() == View.HOME

    def test_unauthenticated_resolves_login(self, controller):
        controller.state.view = View.HOME
        assert controller.resolve_view() == View.LOGIN


class TestReport:
    """Verify report loading and navigation back home."""

    def test_report_entered(self, admin, mock_client, report_payload):
        mock_client.get_report.return_value = report_payload

        report = admin.request_report(10)

        mock_client.get_report.assert_called_once_with(10, 1)
        assert admin.state.view == View.REPORT
        assert admin.state.active_report is report
        assert admin.resolve_view() == View.REPORT

    def test_navigate_home_clears_report(self, admin, mock_client, report_payload):
        mock_client.get_report.return_value = report_payload
        admin.request_report(10)

        admin.navigate_home()

        assert admin.state.view == View.HOME
        assert admin.state.active_report is None


class TestCreateSurvey:
    """Verify draft submission."""

    def test_submit_draft_returns_home_and_refreshes(self, admin, mock_client):
        admin.open_create()
        draft = SurveyDraft(title="T")
        draft.update_field(0, "question_text", "Q1")

        admin.submit_draft(draft)

        user_id, body = mock_client.create_survey.call_args[0]
        assert user_id == 1
        assert body["title"] == "T"
        assert body["questions"][0]["questionText"] == "Q1"
        assert body["questions"][0]["type"] == "TEXT"
        assert admin.state.view == View.HOME
        assert mock_client.list_surveys.call_count == 2

    def test_invalid_draft_not_sent(self, admin, mock_client):
        admin.open_create()

        with pytest.raises(ValidationFailedError, match="survey title"):
            admin.submit_draft(SurveyDraft())

        mock_client.create_survey.assert_not_called()
        assert admin.state.view == View.CREATE

    def test_backend_rejection(self, admin, mock_client):
        admin.open_create()
        mock_client.create_survey.side_effect = RequestRejectedError("Forbidden", 400)
        draft = SurveyDraft(title="T")
        draft.update_field(0, "question_text", "Q1")

        with pytest.raises(AuthorizationError, match="Only admins can create surveys"):
            admin.submit_draft(draft)

        assert admin.state.view == View.CREATE


class TestTakeSurvey:
    """Verify selecting and submitting a survey."""

    def test_select_survey(self, regular):
        survey = regular.select_survey(10)

        assert regular.state.view == View.TAKE
        assert regular.state.active_survey is survey

    def test_select_unknown_survey(self, regular):
        with pytest.raises(KeyError):
            regular.select_survey(999)
        assert regular.state.view == View.HOME

    def test_incomplete_answers_blocked(self, regular, mock_client, text_rating_survey):
        regular.state.surveys = [text_rating_survey]
        regular.select_survey(20)
        collector = AnswerCollector(text_rating_survey)
        collector.set_answer(201, "Looks good")

        with pytest.raises(IncompleteAnswersError, match="Missing 1 answer"):
            regular.submit_answers(collector)

        mock_client.submit_response.assert_not_called()
        assert regular.state.view == View.TAKE

    def test_submit_answers(self, regular, mock_client, text_rating_survey):
        regular.state.surveys = [text_rating_survey]
        regular.select_survey(20)
        collector = AnswerCollector(text_rating_survey)
        collector.set_answer(201, "Looks good")
        collector.set_answer(202, 4)

        regular.submit_answers(collector)

        survey_id, user_id, body = mock_client.submit_response.call_args[0]
        assert (survey_id, user_id) == (20, 2)
        assert body == {
            "answers": [
                {"questionId": 201, "answerText": "Looks good", "audioMimeType": None},
                {"questionId": 202, "answerText": "4", "audioMimeType": None},
            ]
        }
        assert regular.state.view == View.HOME
        assert regular.state.active_survey is None


class TestLogout:
    """Logout tears the session down from any authenticated view."""

    @pytest.mark.parametrize("view", [View.HOME, View.CREATE, View.TAKE, View.REPORT])
    def test_logout_clears_everything(self, admin, mock_client, report_payload, view):
        if view == View.CREATE:
            admin.open_create()
        elif view == View.TAKE:
            admin.select_survey(10)
        elif view == View.REPORT:
            mock_client.get_report.return_value = report_payload
            admin.request_report(10)

        admin.logout()

        state = admin.state
        assert state.view == View.LOGIN
        assert state.user is None
        assert state.surveys == []
        assert state.active_survey is None
        assert state.active_report is None
