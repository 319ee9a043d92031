"""
Session-scoped token store.

One ``TokenStore`` is built per request from that request's cookies and
handed to every core operation. Writes and clears are recorded so the HTTP
layer can serialize them back onto the response.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional, Union

from app.models.credential import Credential

ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"
TOKEN_NAMES = (ACCESS_TOKEN, REFRESH_TOKEN)

Clock = Callable[[], datetime]
TTL = Union[int, timedelta, None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    value: str
    expires_at: Optional[datetime]


@dataclass(frozen=True)
class StoreChange:
    """A pending write (``value`` set) or clear (``value`` is None)."""

    name: str
    value: Optional[str]
    ttl_seconds: Optional[int] = None

    @property
    def is_clear(self) -> bool:
        return self.value is None


class TokenStore:
    """Holds the access and refresh token for a single browser session."""

    def __init__(
        self,
        initial: Optional[Mapping[str, Optional[str]]] = None,
        *,
        clock: Clock = _utcnow,
    ) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._changes: dict[str, StoreChange] = {}
        for name, value in (initial or {}).items():
            _check_name(name)
            if value:
                # Browser-side expiry is enforced by the cookie itself.
                self._entries[name] = _Entry(value=value, expires_at=None)

    def set(self, name: str, value: str, ttl: TTL = None) -> None:
        _check_name(name)
        if not value:
            raise ValueError(f"Refusing to store an empty {name}.")
        ttl_seconds = _ttl_seconds(ttl)
        expires_at = (
            self._clock() + timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None
        )
        self._entries[name] = _Entry(value=value, expires_at=expires_at)
        self._changes[name] = StoreChange(name=name, value=value, ttl_seconds=ttl_seconds)

    def get(self, name: str) -> Optional[str]:
        _check_name(name)
        entry = self._entries.get(name)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[name]
            return None
        return entry.value

    def clear(self, name: str) -> None:
        _check_name(name)
        self._entries.pop(name, None)
        self._changes[name] = StoreChange(name=name, value=None)

    def clear_all(self) -> None:
        for name in TOKEN_NAMES:
            self.clear(name)

    @property
    def is_authenticated(self) -> bool:
        return any(self.get(name) for name in TOKEN_NAMES)

    def credential(self) -> Credential:
        return Credential(
            access_token=self.get(ACCESS_TOKEN),
            refresh_token=self.get(REFRESH_TOKEN),
        )

    def commit(
        self,
        credential: Credential,
        *,
        access_ttl: TTL,
        refresh_ttl: TTL,
    ) -> None:
        """Write the tokens a credential carries; absent tokens are left untouched."""
        self.commit_access_token(credential, ttl=access_ttl)
        if credential.refresh_token:
            self.set(REFRESH_TOKEN, credential.refresh_token, refresh_ttl)

    def commit_access_token(self, credential: Credential, *, ttl: TTL) -> None:
        if credential.access_token:
            self.set(ACCESS_TOKEN, credential.access_token, credential.expires_in or ttl)

    def pending_changes(self) -> list[StoreChange]:
        return [self._changes[name] for name in TOKEN_NAMES if name in self._changes]


def _check_name(name: str) -> None:
    if name not in TOKEN_NAMES:
        raise KeyError(f"Unknown token name: {name}")


def _ttl_seconds(ttl: TTL) -> Optional[int]:
    if ttl is None:
        return None
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds())
    return int(ttl)


__all__ = [
    "ACCESS_TOKEN",
    "REFRESH_TOKEN",
    "StoreChange",
    "TOKEN_NAMES",
    "TokenStore",
]
