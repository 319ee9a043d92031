"""
Calendar proxy: fetch upcoming events with the session's credential,
refreshing the access token first when only a refresh token is held.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

import httpx
import httplib2
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from app.core.errors import CalendarAccessError, ErrorOutcome, OAuthTokenExchangeError
from app.models.credential import Credential
from app.services.error_classifier import classify_upstream_error

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from app.clients import GoogleCalendarClient, GoogleOAuthClient

logger = logging.getLogger(__name__)

UPSTREAM_ERRORS = (
    HttpError,
    httpx.HTTPError,
    httplib2.HttpLib2Error,
    OAuthTokenExchangeError,
    RefreshError,
    OSError,
)


@dataclass(frozen=True)
class CalendarFetchResult:
    events: list[dict]
    credential: Credential
    refreshed: bool = False


class CalendarProxyService:
    """Read-only window onto the user's upcoming events."""

    def __init__(
        self,
        *,
        oauth_client: "GoogleOAuthClient",
        calendar_client: "GoogleCalendarClient",
    ) -> None:
        self._oauth = oauth_client
        self._calendar = calendar_client

    async def list_upcoming_events(
        self,
        credential: Credential,
        *,
        now: Optional[datetime] = None,
    ) -> CalendarFetchResult:
        """
        Return the next events for ``credential``.

        The returned credential is the one actually used; ``refreshed`` tells
        the caller a new access token has to be persisted. Every failure is
        raised as ``CalendarAccessError`` carrying its classified outcome.
        """
        if not credential.is_authenticated:
            raise CalendarAccessError(ErrorOutcome.not_authenticated())

        refreshed = False
        try:
            if not credential.access_token:
                logger.info("Access token absent; refreshing before calendar fetch")
                credential = await self._oauth.refresh_token(credential.refresh_token)
                refreshed = True

            events = await self._calendar.list_upcoming_events(
                access_token=credential.access_token,
                now=now,
            )
        except UPSTREAM_ERRORS as exc:
            outcome = classify_upstream_error(exc)
            logger.warning(
                "Calendar fetch failed: %s (%s)",
                outcome.kind.value,
                exc.__class__.__name__,
            )
            raise CalendarAccessError(
                outcome, refreshed_credential=credential if refreshed else None
            ) from exc

        return CalendarFetchResult(events=events, credential=credential, refreshed=refreshed)


__all__ = ["CalendarFetchResult", "CalendarProxyService", "UPSTREAM_ERRORS"]
