"""Expose constructed client wrappers."""

from .google_auth import GoogleOAuthClient
from .google_calendar import GoogleCalendarClient

__all__ = [
    "GoogleCalendarClient",
    "GoogleOAuthClient",
]
