"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_calendar_client,
    get_calendar_proxy_service,
    get_cookie_session_adapter,
    get_google_oauth_client,
    get_session_service,
    get_token_cipher_service,
)
from .config import SettingsDependency, get_app_settings, get_google_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_calendar_client",
    "get_calendar_proxy_service",
    "get_cookie_session_adapter",
    "get_google_settings",
    "get_google_oauth_client",
    "get_session_service",
    "get_token_cipher_service",
]
