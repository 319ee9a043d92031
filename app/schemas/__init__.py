"""Public schema exports."""

from .auth import (
    AuthConfigResponse,
    AuthStatusResponse,
    AuthUrlResponse,
    LogoutResponse,
)
from .errors import ErrorResponse

__all__ = [
    "AuthConfigResponse",
    "AuthStatusResponse",
    "AuthUrlResponse",
    "ErrorResponse",
    "LogoutResponse",
]
