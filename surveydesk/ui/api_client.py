"""
Synchronous HTTP client for the survey backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging

import httpx
import streamlit as st

from surveydesk.core.config import get_settings
from surveydesk.core.exceptions import (
    AuthorizationError,
    ConnectivityError,
    RequestRejectedError,
)

logger = logging.getLogger(__name__)

_FORBIDDEN_STATUSES = frozenset({401, 403})


class APIClient:
    """Thin synchronous wrapper around httpx for calling the survey backend.

    All methods return parsed JSON or raise a ``SurveyDeskError`` subclass:
    ``ConnectivityError`` when the backend cannot be reached,
    ``AuthorizationError`` for 401/403 and ``RequestRejectedError`` for any
    other non-success status.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the backend, including the ``/api`` prefix.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with error mapping.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/surveys").
            **kwargs: Passed through to httpx (json, params, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            ConnectivityError: On connection, timeout, or other transport errors.
            AuthorizationError: On 401/403 responses.
            RequestRejectedError: On any other error status.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            logger.warning("Backend unreachable at %s", self._base_url)
            raise ConnectivityError(
                f"Cannot connect to the backend server at {self._base_url}. "
                "Please ensure it is running.",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise ConnectivityError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            status = exc.response.status_code
            logger.warning("%s %s rejected (%d): %s", method.upper(), path, status, detail)
            if status in _FORBIDDEN_STATUSES:
                raise AuthorizationError(detail) from None
            raise RequestRejectedError(detail, status_code=status) from None
        except httpx.HTTPError as exc:
            raise ConnectivityError(f"Network error: {exc}", category="network") from None

    # -- auth --

    def login(self, username: str, password: str) -> dict:
        return self._request(
            "post", "/auth/login", json={"username": username, "password": password}
        ).json()

    def register(self, username: str, email: str, password: str, admin: bool = False) -> None:
        """Create an account; ``admin=True`` uses the admin registration endpoint."""
        endpoint = "/auth/create-admin" if admin else "/auth/register"
        self._request(
            "post",
            endpoint,
            json={"username": username, "email": email, "password": password},
        )

    # -- surveys --

    def list_surveys(self) -> list[dict]:
        data = self._request("get", "/surveys").json()
        return data if isinstance(data, list) else []

    def create_survey(self, user_id: int, data: dict) -> dict | None:
        resp = self._request("post", "/surveys", params={"userId": user_id}, json=data)
        return _json_or_none(resp)

    def submit_response(self, survey_id: int, user_id: int, data: dict) -> dict | None:
        resp = self._request(
            "post",
            f"/surveys/{survey_id}/responses",
            params={"userId": user_id},
            json=data,
        )
        return _json_or_none(resp)

    def get_report(self, survey_id: int, user_id: int) -> dict:
        return self._request(
            "get", f"/surveys/{survey_id}/report", params={"userId": user_id}
        ).json()

    # -- health --

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self._request("get", "/surveys")
            return True, "Connected"
        except ConnectivityError as exc:
            return False, exc.detail
        except (AuthorizationError, RequestRejectedError):
            return True, "Connected"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or body.get("error") or body)
    return str(body)


def _json_or_none(response: httpx.Response) -> dict | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


@st.cache_resource
def get_api_client(base_url: str | None = None) -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    """
    return APIClient(base_url=base_url)
