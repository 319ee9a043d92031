try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from app.core.errors import CalendarAccessError, ErrorKind, InvalidGrantError
from app.models.credential import Credential
from app.services.calendar_proxy import CalendarProxyService

try:
    from .fakes import FakeCalendarClient, FakeOAuthClient
except ImportError:  # pragma: no cover - fallback for direct execution
    from fakes import FakeCalendarClient, FakeOAuthClient  # type: ignore

EVENTS = [
    {"id": "evt-1", "summary": "Haircut", "start": {"dateTime": "2024-05-02T10:00:00+02:00"}},
    {"id": "evt-2", "summary": "Inventory", "start": {"date": "2024-05-03"}},
]


def _http_error(status: int, message: str) -> HttpError:
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


def _proxy(oauth: FakeOAuthClient, calendar: FakeCalendarClient) -> CalendarProxyService:
    return CalendarProxyService(oauth_client=oauth, calendar_client=calendar)


@pytest.mark.anyio
async def test_no_tokens_fails_without_network() -> None:
    oauth, calendar = FakeOAuthClient(), FakeCalendarClient(EVENTS)

    with pytest.raises(CalendarAccessError) as exc_info:
        await _proxy(oauth, calendar).list_upcoming_events(Credential())

    assert exc_info.value.kind is ErrorKind.NOT_AUTHENTICATED
    assert oauth.refresh_calls == []
    assert calendar.calls == []


@pytest.mark.anyio
async def test_access_token_is_used_directly() -> None:
    oauth, calendar = FakeOAuthClient(), FakeCalendarClient(EVENTS)
    credential = Credential(access_token="live", refresh_token="refresh")

    result = await _proxy(oauth, calendar).list_upcoming_events(credential)

    assert result.events == EVENTS
    assert result.credential is credential
    assert not result.refreshed
    assert oauth.refresh_calls == []
    assert calendar.calls == [{"access_token": "live"}]


@pytest.mark.anyio
async def test_refresh_only_refreshes_once_before_fetch() -> None:
    oauth, calendar = FakeOAuthClient(refreshed_token="minted"), FakeCalendarClient(EVENTS)

    result = await _proxy(oauth, calendar).list_upcoming_events(Credential(refresh_token="refresh"))

    assert oauth.refresh_calls == ["refresh"]
    assert calendar.calls[0]["access_token"] == "minted"
    assert result.refreshed
    assert result.credential.access_token == "minted"
    assert result.credential.refresh_token == "refresh"


@pytest.mark.anyio
async def test_revoked_refresh_token_is_auth_expired() -> None:
    oauth = FakeOAuthClient(refresh_error=InvalidGrantError("Token has been expired or revoked."))
    calendar = FakeCalendarClient(EVENTS)

    with pytest.raises(CalendarAccessError) as exc_info:
        await _proxy(oauth, calendar).list_upcoming_events(Credential(refresh_token="revoked"))

    assert exc_info.value.kind is ErrorKind.AUTH_EXPIRED
    assert calendar.calls == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("status", "message", "kind"),
    [
        (401, "Invalid Credentials", ErrorKind.AUTH_EXPIRED),
        (403, "Calendar API has not been used in project 1 before or it is disabled.", ErrorKind.API_DISABLED),
        (403, "Insufficient Permission", ErrorKind.ACCESS_DENIED),
        (500, "Backend Error", ErrorKind.UPSTREAM_FAILURE),
    ],
)
async def test_upstream_failures_are_classified(status: int, message: str, kind: ErrorKind) -> None:
    calendar = FakeCalendarClient(error=_http_error(status, message))

    with pytest.raises(CalendarAccessError) as exc_info:
        await _proxy(FakeOAuthClient(), calendar).list_upcoming_events(Credential(access_token="a"))

    assert exc_info.value.kind is kind
    assert isinstance(exc_info.value.__cause__, HttpError)


@pytest.mark.anyio
async def test_failure_after_refresh_carries_new_credential() -> None:
    calendar = FakeCalendarClient(error=_http_error(403, "Insufficient Permission"))

    with pytest.raises(CalendarAccessError) as exc_info:
        await _proxy(FakeOAuthClient(refreshed_token="minted"), calendar).list_upcoming_events(
            Credential(refresh_token="refresh")
        )

    assert exc_info.value.refreshed_credential.access_token == "minted"


@pytest.mark.anyio
async def test_unexpected_errors_propagate_unclassified() -> None:
    calendar = FakeCalendarClient(error=RuntimeError("bug"))

    with pytest.raises(RuntimeError):
        await _proxy(FakeOAuthClient(), calendar).list_upcoming_events(Credential(access_token="a"))
