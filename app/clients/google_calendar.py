"""Google Calendar client wrapper."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

ServiceFactory = Callable[[str], Any]

MAX_UPCOMING_EVENTS = 20


class GoogleCalendarClient:
    """Read upcoming events from the user's primary calendar."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        service_factory: Optional[ServiceFactory] = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._service_factory = service_factory or self._build_service

    def _build_service(self, access_token: str) -> Any:
        credentials = Credentials(token=access_token)
        # A bare access token cannot be refreshed here; a 401 must surface as
        # HttpError so the session layer can clear the stored tokens.
        http = google_auth_httplib2.AuthorizedHttp(
            credentials,
            http=httplib2.Http(timeout=self._timeout_seconds),
            refresh_status_codes=(),
        )
        return build("calendar", "v3", http=http, cache_discovery=False)

    async def list_upcoming_events(
        self,
        *,
        access_token: str,
        now: Optional[datetime] = None,
    ) -> list[dict]:
        """
        Return up to ``MAX_UPCOMING_EVENTS`` events starting from ``now``.

        Recurring events are expanded into single instances and ordered by
        start time. Items are returned exactly as Google sends them.
        Raises ``googleapiclient.errors.HttpError`` on upstream failures.
        """
        time_min = (now or datetime.now(timezone.utc)).isoformat()

        def _execute_list() -> list[dict]:
            service = self._service_factory(access_token)
            response = (
                service.events()
                .list(
                    calendarId="primary",
                    timeMin=time_min,
                    maxResults=MAX_UPCOMING_EVENTS,
                    singleEvents=True,
                    orderBy="startTime",
                )
                .execute()
            )
            return response.get("items", [])

        return await asyncio.to_thread(_execute_list)


__all__ = ["GoogleCalendarClient", "MAX_UPCOMING_EVENTS"]
