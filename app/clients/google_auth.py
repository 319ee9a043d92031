"""
Google OAuth utilities.

These helpers build the consent URL, exchange authorization codes and mint
new access tokens from refresh tokens. Nothing here persists tokens; callers
commit the returned ``Credential`` to the session themselves.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.core.config import CALENDAR_READONLY_SCOPE, GoogleSettings
from app.core.errors import (
    ConfigurationMissingError,
    InvalidGrantError,
    OAuthTokenExchangeError,
)
from app.models.credential import Credential

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange codes and refresh tokens."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        google_settings: GoogleSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._transport = transport

    @property
    def redirect_uri(self) -> str:
        return self._google.redirect_uri

    def _require_configuration(self) -> None:
        missing = self._google.missing_fields()
        if missing:
            raise ConfigurationMissingError(missing)

    def build_authorization_url(self) -> str:
        """Construct the Google OAuth consent URL for read-only calendar access."""
        self._require_configuration()
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": CALENDAR_READONLY_SCOPE,
            # offline + consent so Google issues a refresh token on every login
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> Credential:
        """Exchange a single-use authorization code for a token pair."""
        if not code or not code.strip():
            raise InvalidGrantError("Authorization code is missing.")
        self._require_configuration()

        payload = await self._post_token_request(
            {
                "code": code,
                "client_id": self._google.client_id,
                "client_secret": self._google.client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            }
        )
        access_token = payload.get("access_token")
        if not access_token:
            raise OAuthTokenExchangeError("Incomplete token payload returned from Google.")

        return Credential(
            access_token=access_token,
            refresh_token=payload.get("refresh_token"),
            expires_in=_as_int(payload.get("expires_in")),
        )

    async def refresh_token(self, refresh_token: str) -> Credential:
        """Mint a new access token; the refresh token itself is carried over."""
        if not refresh_token:
            raise InvalidGrantError("Refresh token is missing.")
        self._require_configuration()

        payload = await self._post_token_request(
            {
                "client_id": self._google.client_id,
                "client_secret": self._google.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            }
        )
        access_token = payload.get("access_token")
        if not access_token:
            raise OAuthTokenExchangeError("Incomplete refresh payload returned from Google.")

        return Credential(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=_as_int(payload.get("expires_in")),
        )

    async def _post_token_request(self, data: dict) -> dict:
        grant_type = data["grant_type"]
        try:
            async with httpx.AsyncClient(
                timeout=self._google.http_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.TOKEN_URL, data=data)
        except httpx.HTTPError as exc:
            logger.warning("Token endpoint unreachable for %s: %s", grant_type, exc)
            raise OAuthTokenExchangeError(f"Token endpoint request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            error_code, description = _parse_error(response)
            logger.warning(
                "Token endpoint rejected %s with %s (%s)",
                grant_type,
                response.status_code,
                error_code or "unknown",
            )
            message = description or error_code or response.text
            if error_code == "invalid_grant":
                raise InvalidGrantError(message, status_code=response.status_code)
            raise OAuthTokenExchangeError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise OAuthTokenExchangeError("Token endpoint returned invalid JSON.") from exc


def _parse_error(response: httpx.Response) -> tuple[Optional[str], Optional[str]]:
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    error = body.get("error")
    if isinstance(error, dict):
        # Some Google endpoints nest the error object.
        return error.get("status"), error.get("message")
    return error, body.get("error_description")


def _as_int(value: object) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


__all__ = ["GoogleOAuthClient"]
