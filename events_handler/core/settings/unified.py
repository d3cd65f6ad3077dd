"""Unified settings composition for convenient access.

Usage:
    from events_handler.core.settings import get_settings

    settings = get_settings()
    print(settings.app.port)
    print(settings.scenarios.zaakcreate_ids)

Each nested settings class still respects its own env prefix.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .logs import LoggingSettings
from .notify import NotifySettings
from .scenarios import ScenarioSettings
from .upstream import CaseRegistrySettings, PartyRegistrySettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings()
        assert settings.app.debug is False
        assert settings.party_registry.api_version == "v1"
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    case_registry: CaseRegistrySettings = Field(default_factory=CaseRegistrySettings)
    party_registry: PartyRegistrySettings = Field(default_factory=PartyRegistrySettings)
    notify: NotifySettings = Field(default_factory=NotifySettings)
    scenarios: ScenarioSettings = Field(default_factory=ScenarioSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached).

    Returns:
        Settings: Unified settings with all domain configurations.
    """
    return Settings()
