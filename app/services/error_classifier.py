"""
Map upstream failures from Google onto the closed ``ErrorOutcome`` set.

Rules are evaluated in order and the first match wins:

1. the API is disabled for the project         -> ApiDisabled
2. the credential or its refresh was rejected  -> AuthExpired
3. permission problem (403)                    -> AccessDenied
4. anything else                               -> UpstreamFailure
"""

from __future__ import annotations

from http import HTTPStatus
from typing import NamedTuple, Optional

import httpx
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from app.core.errors import ErrorOutcome, InvalidGrantError, OAuthTokenExchangeError

API_DISABLED_MARKERS = ("API has not been used", "is disabled")


class UpstreamSignal(NamedTuple):
    status: Optional[int]
    message: str
    body: str


def extract_signal(exc: BaseException) -> UpstreamSignal:
    """Pull the status code, message and raw body out of a client exception."""
    if isinstance(exc, HttpError):
        content = exc.content or b""
        body = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else str(content)
        return UpstreamSignal(_as_status(getattr(exc.resp, "status", None)), exc.reason or "", body)
    if isinstance(exc, httpx.HTTPStatusError):
        return UpstreamSignal(exc.response.status_code, str(exc), exc.response.text)
    if isinstance(exc, OAuthTokenExchangeError):
        return UpstreamSignal(exc.status_code, str(exc), "")
    # RefreshError, transport and socket errors carry no HTTP status.
    return UpstreamSignal(None, str(exc), "")


def classify_upstream_error(exc: BaseException) -> ErrorOutcome:
    signal = extract_signal(exc)
    text = f"{signal.message}\n{signal.body}"

    if any(marker in text for marker in API_DISABLED_MARKERS):
        return ErrorOutcome.api_disabled()
    if isinstance(exc, (InvalidGrantError, RefreshError)):
        return ErrorOutcome.auth_expired()
    if signal.status == HTTPStatus.UNAUTHORIZED:
        return ErrorOutcome.auth_expired()
    if signal.status == HTTPStatus.FORBIDDEN:
        return ErrorOutcome.access_denied(signal.message or None)
    return ErrorOutcome.upstream_failure(signal.message or None)


def _as_status(value: object) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


__all__ = [
    "API_DISABLED_MARKERS",
    "UpstreamSignal",
    "classify_upstream_error",
    "extract_signal",
]
