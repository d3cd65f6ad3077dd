"""Upstream registry settings.

The case registry (OpenZaak) holds cases, their statuses, case types and
roles. The party registry (OpenKlant) holds citizen contact data and receives
the contact moments that mark an event as processed.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CaseRegistrySettings(BaseSettings):
    """Case registry (OpenZaak) connection settings.

    Environment variables use OPENZAAK_ prefix.
    Example: OPENZAAK_BASE_URL=https://openzaak.example.nl
    """

    base_url: HttpUrl | None = Field(
        default=None,
        description="Base URL of the case registry; absolute resource URLs bypass it",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Bearer token sent with every case registry request",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Per-request timeout; exceeding it counts as the registry being unavailable",
    )

    model_config = SettingsConfigDict(
        env_prefix="OPENZAAK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


class PartyRegistrySettings(BaseSettings):
    """Party registry (OpenKlant) connection settings.

    Environment variables use OPENKLANT_ prefix.
    Example: OPENKLANT_API_VERSION=v2
    """

    base_url: HttpUrl | None = Field(
        default=None,
        description="Base URL of the party registry",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Bearer token sent with every party registry request",
    )
    api_version: Literal["v1", "v2"] = Field(
        default="v1",
        description="Party registry API generation (v1: klanten, v2: partijen)",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Per-request timeout; exceeding it counts as the registry being unavailable",
    )
    source_organization: str = Field(
        default="000000000",
        min_length=9,
        max_length=9,
        description="RSIN of the organization registering contact moments",
    )

    model_config = SettingsConfigDict(
        env_prefix="OPENKLANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["CaseRegistrySettings", "PartyRegistrySettings"]
