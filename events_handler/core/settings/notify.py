"""Notification delivery provider settings."""

from __future__ import annotations

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotifySettings(BaseSettings):
    """Notify (GOV.UK Notify compatible) provider settings.

    Environment variables use NOTIFY_ prefix.
    Example: NOTIFY_BASE_URL=https://api.notify.example.nl
    """

    base_url: HttpUrl | None = Field(
        default=None,
        description="Base URL of the delivery provider API",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key in the form '<key name>-<service id>-<secret key>'",
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Timeout for a single delivery request",
    )

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["NotifySettings"]
