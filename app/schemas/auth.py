"""Response schemas for the authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AuthUrlResponse(_CamelModel):
    url: str = Field(..., description="Google consent URL to open in a pop-up.")


class AuthStatusResponse(_CamelModel):
    is_authenticated: bool = Field(..., alias="isAuthenticated")


class AuthConfigResponse(_CamelModel):
    redirect_uri: str = Field(
        ...,
        alias="redirectUri",
        description="Callback URL to register in the Google Cloud console.",
    )


class LogoutResponse(BaseModel):
    success: bool = True


__all__ = [
    "AuthConfigResponse",
    "AuthStatusResponse",
    "AuthUrlResponse",
    "LogoutResponse",
]
