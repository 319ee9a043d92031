try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httplib2
import httpx
import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from app.core.errors import (
    API_ENABLEMENT_URL,
    HTTP_STATUS_BY_KIND,
    ErrorKind,
    InvalidGrantError,
    OAuthTokenExchangeError,
)
from app.services.error_classifier import classify_upstream_error

DISABLED_MESSAGE = (
    "Google Calendar API has not been used in project 1234 before or it is disabled. "
    "Enable it by visiting the console then retry."
)


def _http_error(status: int, message: str) -> HttpError:
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


def test_disabled_api_maps_to_api_disabled_with_link() -> None:
    outcome = classify_upstream_error(_http_error(403, DISABLED_MESSAGE))

    assert outcome.kind is ErrorKind.API_DISABLED
    assert outcome.link == API_ENABLEMENT_URL
    assert outcome.status_code == 409


def test_disabled_indicator_wins_over_unauthorized_status() -> None:
    outcome = classify_upstream_error(_http_error(401, DISABLED_MESSAGE))

    assert outcome.kind is ErrorKind.API_DISABLED


def test_unauthorized_maps_to_auth_expired() -> None:
    outcome = classify_upstream_error(_http_error(401, "Invalid Credentials"))

    assert outcome.kind is ErrorKind.AUTH_EXPIRED
    assert outcome.clears_credentials
    assert outcome.status_code == 401


def test_forbidden_passes_upstream_message_through() -> None:
    outcome = classify_upstream_error(
        _http_error(403, "Request had insufficient authentication scopes.")
    )

    assert outcome.kind is ErrorKind.ACCESS_DENIED
    assert outcome.details == "Request had insufficient authentication scopes."
    assert not outcome.clears_credentials


def test_other_status_is_upstream_failure_with_detail() -> None:
    outcome = classify_upstream_error(_http_error(500, "Backend Error"))

    assert outcome.kind is ErrorKind.UPSTREAM_FAILURE
    assert outcome.message == "Failed to fetch events"
    assert outcome.details == "Backend Error"
    assert outcome.status_code == 500


def test_rejected_refresh_token_maps_to_auth_expired() -> None:
    outcome = classify_upstream_error(InvalidGrantError("Token has been expired or revoked.", status_code=400))

    assert outcome.kind is ErrorKind.AUTH_EXPIRED


def test_token_endpoint_outage_is_upstream_failure() -> None:
    outcome = classify_upstream_error(OAuthTokenExchangeError("backend_error", status_code=503))

    assert outcome.kind is ErrorKind.UPSTREAM_FAILURE


def test_httpx_status_error_uses_response_status() -> None:
    request = httpx.Request("GET", "https://www.googleapis.com/calendar/v3")
    response = httpx.Response(401, request=request, text="unauthorized")
    exc = httpx.HTTPStatusError("unauthorized", request=request, response=response)

    assert classify_upstream_error(exc).kind is ErrorKind.AUTH_EXPIRED


def test_network_error_without_status_is_upstream_failure() -> None:
    outcome = classify_upstream_error(TimeoutError("timed out"))

    assert outcome.kind is ErrorKind.UPSTREAM_FAILURE
    assert outcome.details == "timed out"


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_every_kind_has_an_http_status(kind: ErrorKind) -> None:
    assert kind in HTTP_STATUS_BY_KIND


def test_response_body_omits_empty_fields() -> None:
    outcome = classify_upstream_error(_http_error(401, "Invalid Credentials"))

    assert outcome.to_response_body() == {"error": "Authentication expired"}


def test_refresh_error_from_transport_is_auth_expired() -> None:
    outcome = classify_upstream_error(
        RefreshError("The credentials do not contain the necessary fields need to refresh the access token.")
    )

    assert outcome.kind is ErrorKind.AUTH_EXPIRED
    assert outcome.clears_credentials


class _CodedError(Exception):
    code = 401


def test_unlisted_exception_attributes_are_not_read_as_status() -> None:
    outcome = classify_upstream_error(_CodedError("socket closed"))

    assert outcome.kind is ErrorKind.UPSTREAM_FAILURE


def test_dns_failure_is_upstream_failure() -> None:
    outcome = classify_upstream_error(httplib2.ServerNotFoundError("Unable to find the server"))

    assert outcome.kind is ErrorKind.UPSTREAM_FAILURE
