"""
Session credential value object.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """Access/refresh token pair held for one browser session."""

    model_config = ConfigDict(frozen=True)

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = Field(
        None,
        description="Lifetime hint from the token endpoint, in seconds.",
    )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token or self.refresh_token)


__all__ = ["Credential"]
