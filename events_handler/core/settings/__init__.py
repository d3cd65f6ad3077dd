"""Modular Pydantic Settings v2 configuration.

Import settings via cached loaders (recommended):
    from events_handler.core.settings import get_scenario_settings

Or use unified settings for convenient access to all domains:
    from events_handler.core.settings import get_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables (production)
    3. .env file (development only)
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_case_registry_settings,
    get_logging_settings,
    get_notify_settings,
    get_party_registry_settings,
    get_scenario_settings,
)
from .logs import LoggingSettings
from .notify import NotifySettings
from .scenarios import ScenarioSettings
from .unified import Settings, get_settings
from .upstream import CaseRegistrySettings, PartyRegistrySettings

__all__ = [
    "AppSettings",
    "CaseRegistrySettings",
    "LoggingSettings",
    "NotifySettings",
    "PartyRegistrySettings",
    "ScenarioSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_case_registry_settings",
    "get_logging_settings",
    "get_notify_settings",
    "get_party_registry_settings",
    "get_scenario_settings",
    "get_settings",
]
