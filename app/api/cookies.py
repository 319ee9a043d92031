"""
Serialize the session ``TokenStore`` to and from HTTP cookies.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request, Response

from app.services.token_cipher import TokenCipherService
from app.services.token_store import TOKEN_NAMES, TokenStore

logger = logging.getLogger(__name__)

# The login flow finishes inside a pop-up, so the cookies must be sent on
# cross-site requests: SameSite=None, which browsers only accept with Secure.
COOKIE_ATTRIBUTES = {
    "httponly": True,
    "secure": True,
    "samesite": "none",
    "path": "/",
}


class CookieSessionAdapter:
    """Reads tokens from request cookies and writes store changes onto a response."""

    def __init__(self, cipher: Optional[TokenCipherService] = None) -> None:
        self._cipher = cipher

    def load(self, request: Request) -> TokenStore:
        values: dict[str, Optional[str]] = {}
        for name in TOKEN_NAMES:
            raw = request.cookies.get(name)
            values[name] = self._decode(name, raw) if raw else None
        return TokenStore(values)

    def persist(self, store: TokenStore, response: Response) -> Response:
        for change in store.pending_changes():
            if change.is_clear:
                response.delete_cookie(change.name, **COOKIE_ATTRIBUTES)
            else:
                response.set_cookie(
                    change.name,
                    self._encode(change.value),
                    max_age=change.ttl_seconds,
                    **COOKIE_ATTRIBUTES,
                )
        return response

    def _encode(self, value: str) -> str:
        return self._cipher.encrypt(value) if self._cipher else value

    def _decode(self, name: str, raw: str) -> Optional[str]:
        if self._cipher is None:
            return raw
        try:
            return self._cipher.decrypt(raw)
        except ValueError:
            logger.warning("Ignoring undecryptable %s cookie", name)
            return None


__all__ = ["COOKIE_ATTRIBUTES", "CookieSessionAdapter"]
