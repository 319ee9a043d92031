"""Service layer exports."""

from .calendar_proxy import CalendarFetchResult, CalendarProxyService
from .error_classifier import classify_upstream_error
from .session import SessionService
from .token_cipher import TokenCipherService
from .token_store import ACCESS_TOKEN, REFRESH_TOKEN, TokenStore

__all__ = [
    "ACCESS_TOKEN",
    "CalendarFetchResult",
    "CalendarProxyService",
    "REFRESH_TOKEN",
    "SessionService",
    "TokenCipherService",
    "TokenStore",
    "classify_upstream_error",
]
