"""
Error taxonomy shared by the OAuth exchanger, the calendar proxy and the
HTTP layer.

Exchanger failures are plain exceptions. Calendar failures are reduced to
an ``ErrorOutcome`` whose ``kind`` belongs to the closed ``ErrorKind`` set;
the HTTP layer maps every kind to a status code.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from app.models.credential import Credential

API_ENABLEMENT_URL = (
    "https://console.developers.google.com/apis/api/calendar-json.googleapis.com/overview"
)


class ConfigurationMissingError(Exception):
    """Raised when the deployment lacks Google OAuth configuration."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing Google OAuth configuration: {', '.join(self.missing)}")


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint cannot produce a usable credential."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidGrantError(OAuthTokenExchangeError):
    """The authorization code or refresh token was rejected; re-authorization is required."""


class ErrorKind(str, Enum):
    NOT_AUTHENTICATED = "NotAuthenticated"
    AUTH_EXPIRED = "AuthExpired"
    API_DISABLED = "ApiDisabled"
    ACCESS_DENIED = "AccessDenied"
    UPSTREAM_FAILURE = "UpstreamFailure"


# 409 rather than 403 for permission problems so intermediate proxies that
# rewrite 403 pages leave the JSON body intact.
HTTP_STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.NOT_AUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.AUTH_EXPIRED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.API_DISABLED: HTTPStatus.CONFLICT,
    ErrorKind.ACCESS_DENIED: HTTPStatus.CONFLICT,
    ErrorKind.UPSTREAM_FAILURE: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class ErrorOutcome(BaseModel):
    """Classified result of a failed calendar request."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    details: Optional[str] = None
    link: Optional[str] = None

    @property
    def status_code(self) -> HTTPStatus:
        return HTTP_STATUS_BY_KIND[self.kind]

    @property
    def clears_credentials(self) -> bool:
        """True when the stored tokens were rejected and must be wiped."""
        return self.kind is ErrorKind.AUTH_EXPIRED

    @classmethod
    def not_authenticated(cls) -> "ErrorOutcome":
        return cls(kind=ErrorKind.NOT_AUTHENTICATED, message="Not authenticated")

    @classmethod
    def auth_expired(cls) -> "ErrorOutcome":
        return cls(kind=ErrorKind.AUTH_EXPIRED, message="Authentication expired")

    @classmethod
    def api_disabled(cls) -> "ErrorOutcome":
        return cls(
            kind=ErrorKind.API_DISABLED,
            message="Google Calendar API is not enabled",
            details="Please enable the Google Calendar API in your Google Cloud Console project.",
            link=API_ENABLEMENT_URL,
        )

    @classmethod
    def access_denied(cls, details: Optional[str] = None) -> "ErrorOutcome":
        return cls(
            kind=ErrorKind.ACCESS_DENIED,
            message="Access Denied",
            details=details or "You do not have permission to access this calendar.",
        )

    @classmethod
    def upstream_failure(cls, details: Optional[str] = None) -> "ErrorOutcome":
        return cls(
            kind=ErrorKind.UPSTREAM_FAILURE,
            message="Failed to fetch events",
            details=details,
        )

    def to_response_body(self) -> dict:
        body: dict = {"error": self.message}
        if self.details:
            body["details"] = self.details
        if self.link:
            body["link"] = self.link
        return body


class CalendarAccessError(Exception):
    """Carries a classified calendar failure up to the session boundary."""

    def __init__(
        self,
        outcome: ErrorOutcome,
        *,
        refreshed_credential: Optional["Credential"] = None,
    ) -> None:
        super().__init__(outcome.message)
        self.outcome = outcome
        # Set when a refresh succeeded before the calendar call failed.
        self.refreshed_credential = refreshed_credential

    @property
    def kind(self) -> ErrorKind:
        return self.outcome.kind


__all__ = [
    "API_ENABLEMENT_URL",
    "CalendarAccessError",
    "ConfigurationMissingError",
    "ErrorKind",
    "ErrorOutcome",
    "HTTP_STATUS_BY_KIND",
    "InvalidGrantError",
    "OAuthTokenExchangeError",
]
