"""
Session boundary operations.

Every operation takes the request's ``TokenStore`` explicitly and is the
only place that mutates it; the HTTP layer serializes the store afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.core.config import OAuthSettings
from app.core.errors import CalendarAccessError
from app.services.token_store import TokenStore

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from app.clients import GoogleOAuthClient
    from app.services.calendar_proxy import CalendarProxyService

logger = logging.getLogger(__name__)


class SessionService:
    """Drives login, logout and calendar reads for one browser session at a time."""

    def __init__(
        self,
        *,
        oauth_client: "GoogleOAuthClient",
        calendar_proxy: "CalendarProxyService",
        oauth_settings: OAuthSettings,
    ) -> None:
        self._oauth = oauth_client
        self._proxy = calendar_proxy
        self._settings = oauth_settings

    @property
    def redirect_uri(self) -> str:
        return self._oauth.redirect_uri

    def is_authenticated(self, store: TokenStore) -> bool:
        """Presence check only; token liveness is discovered on the next calendar call."""
        return store.is_authenticated

    def authorization_url(self) -> str:
        return self._oauth.build_authorization_url()

    async def complete_callback(self, store: TokenStore, code: str) -> None:
        credential = await self._oauth.exchange_authorization_code(code)
        store.commit(
            credential,
            access_ttl=self._settings.access_token_ttl_seconds,
            refresh_ttl=self._settings.refresh_token_ttl_seconds,
        )
        logger.info(
            "Google account connected (refresh token issued: %s)",
            bool(credential.refresh_token),
        )

    def logout(self, store: TokenStore) -> None:
        store.clear_all()

    async def fetch_events(self, store: TokenStore) -> list[dict]:
        """
        List upcoming events for the session.

        A refreshed access token is committed before returning or raising.
        When the outcome says the credential was rejected, both tokens are
        cleared so the next status check reports the session as logged out.
        """
        try:
            result = await self._proxy.list_upcoming_events(store.credential())
        except CalendarAccessError as exc:
            if exc.outcome.clears_credentials:
                store.clear_all()
            elif exc.refreshed_credential is not None:
                store.commit_access_token(
                    exc.refreshed_credential, ttl=self._settings.access_token_ttl_seconds
                )
            raise

        if result.refreshed:
            store.commit_access_token(
                result.credential, ttl=self._settings.access_token_ttl_seconds
            )
        return result.events


__all__ = ["SessionService"]
