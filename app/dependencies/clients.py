"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Optional

from app.api.cookies import CookieSessionAdapter
from app.clients import GoogleCalendarClient, GoogleOAuthClient
from app.core.config import get_settings
from app.services import CalendarProxyService, SessionService, TokenCipherService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(settings.google)


@lru_cache()
def get_calendar_client() -> GoogleCalendarClient:
    """Provide the Google Calendar client."""
    settings = _settings()
    return GoogleCalendarClient(timeout_seconds=settings.google.http_timeout_seconds)


@lru_cache()
def get_token_cipher_service() -> Optional[TokenCipherService]:
    """Provide cookie encryption when a secret is configured, otherwise ``None``."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.google.client_secret
    if not secret:
        return None
    return TokenCipherService(
        secret=secret,
        max_age_seconds=settings.oauth.refresh_token_ttl_seconds,
    )


def get_cookie_session_adapter() -> CookieSessionAdapter:
    """Build the cookie adapter around the configured cipher."""
    return CookieSessionAdapter(cipher=get_token_cipher_service())


def get_calendar_proxy_service() -> CalendarProxyService:
    """Build the calendar proxy from the shared clients."""
    settings = _settings()
    return CalendarProxyService(
        oauth_client=get_google_oauth_client(),
        calendar_client=get_calendar_client(),
    )


def get_session_service() -> SessionService:
    """Build the session boundary service."""
    settings = _settings()
    return SessionService(
        oauth_client=get_google_oauth_client(),
        calendar_proxy=get_calendar_proxy_service(),
        oauth_settings=settings.oauth,
    )


__all__ = [
    "get_calendar_client",
    "get_calendar_proxy_service",
    "get_cookie_session_adapter",
    "get_google_oauth_client",
    "get_session_service",
    "get_token_cipher_service",
]
