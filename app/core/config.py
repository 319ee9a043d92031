"""
Application configuration models and helpers.

Settings are read from the environment and an optional ``.env`` file. The
Google OAuth values are optional at load time so the service can boot and
answer status/config requests; OAuth operations raise
``ConfigurationMissingError`` when they need a value that is absent.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"
CALLBACK_PATH = "/auth/callback"


class _EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class GoogleSettings(_EnvSettings):
    """Configuration required for talking to Google OAuth and Calendar."""

    client_id: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_SECRET")
    app_url: Optional[str] = Field(
        None,
        validation_alias="APP_URL",
        description="Public base URL of the deployment; the OAuth redirect is derived from it.",
    )
    http_timeout_seconds: float = Field(10.0, validation_alias="GOOGLE_HTTP_TIMEOUT")

    @property
    def redirect_uri(self) -> str:
        """Callback URL registered with Google, e.g. ``https://host/auth/callback``."""
        base = (self.app_url or "").rstrip("/")
        return f"{base}{CALLBACK_PATH}"

    def missing_fields(self) -> list[str]:
        """Names of the environment variables an OAuth round trip still needs."""
        required = {
            "GOOGLE_CLIENT_ID": self.client_id,
            "GOOGLE_CLIENT_SECRET": self.client_secret,
            "APP_URL": self.app_url,
        }
        return [name for name, value in required.items() if not value]


class OAuthSettings(_EnvSettings):
    """Session cookie lifetimes."""

    access_token_ttl_seconds: int = Field(3600, validation_alias="ACCESS_TOKEN_TTL")
    refresh_token_ttl_seconds: int = Field(
        30 * 24 * 3600,
        validation_alias="REFRESH_TOKEN_TTL",
    )


class SecuritySettings(_EnvSettings):
    """Security-related configuration."""

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting session cookies."
        ),
    )


class AppSettings(_EnvSettings):
    """Root settings object for the FastAPI application."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "CALENDAR_READONLY_SCOPE",
    "CALLBACK_PATH",
    "GoogleSettings",
    "OAuthSettings",
    "SecuritySettings",
    "get_settings",
]
