"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from events_handler.core.settings.loader import get_app_settings

    settings = get_app_settings()  # First call: loads and validates
    settings = get_app_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_app_settings.cache_clear()

    Or override with custom values:
    settings = ScenarioSettings(zaakcreate_ids=["*"])
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .logs import LoggingSettings
from .notify import NotifySettings
from .scenarios import ScenarioSettings
from .unified import get_settings
from .upstream import CaseRegistrySettings, PartyRegistrySettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_case_registry_settings() -> CaseRegistrySettings:
    """Get cached case registry (OpenZaak) settings."""
    return CaseRegistrySettings()


@lru_cache(maxsize=1)
def get_party_registry_settings() -> PartyRegistrySettings:
    """Get cached party registry (OpenKlant) settings."""
    return PartyRegistrySettings()


@lru_cache(maxsize=1)
def get_notify_settings() -> NotifySettings:
    """Get cached delivery provider settings."""
    return NotifySettings()


@lru_cache(maxsize=1)
def get_scenario_settings() -> ScenarioSettings:
    """Get cached scenario settings (templates, allow-lists, toggles)."""
    return ScenarioSettings()


def clear_all_caches() -> None:
    """Drop every cached settings instance (tests, config reloads)."""
    get_app_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_case_registry_settings.cache_clear()
    get_party_registry_settings.cache_clear()
    get_notify_settings.cache_clear()
    get_scenario_settings.cache_clear()
    get_settings.cache_clear()
