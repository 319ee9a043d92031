"""Symmetric encryption for token values written into session cookies."""

from __future__ import annotations

import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken


class TokenCipherService:
    """Encrypt and decrypt cookie values with a Fernet key derived from a secret."""

    def __init__(self, *, secret: str, max_age_seconds: Optional[int] = None) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))
        self._max_age_seconds = max_age_seconds

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a cookie value; raises ``ValueError`` for tampered or stale input."""
        try:
            plaintext = self._fernet.decrypt(
                ciphertext.encode("utf-8"), ttl=self._max_age_seconds
            )
        except InvalidToken as exc:
            raise ValueError("Failed to decrypt token; invalid ciphertext provided.") from exc
        return plaintext.decode("utf-8")


__all__ = ["TokenCipherService"]
