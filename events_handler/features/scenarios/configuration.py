"""Read-only configuration provider for scenarios."""

from __future__ import annotations

from typing import TYPE_CHECKING

from events_handler.core.exceptions import ConfigurationError
from events_handler.features.notify.models import NotifyChannel
from events_handler.features.scenarios.validation import AllowList

if TYPE_CHECKING:
    from uuid import UUID

    from events_handler.core.settings import ScenarioSettings


class ScenarioConfiguration:
    """Resolves template ids, allow-lists and toggles by key.

    Example:
            config = ScenarioConfiguration(get_scenario_settings())
        config.template_id("case_created", NotifyChannel.EMAIL)
        config.allow_list("ZAAKCREATE_IDS")
    """

    def __init__(self, settings: ScenarioSettings) -> None:
        self.settings = settings

    def template_id(self, scenario_key: str, channel: NotifyChannel) -> UUID:
        field = f"{scenario_key}_{channel.value}_template_id"
        value = getattr(self.settings, field, None)
        if value is None:
            raise ConfigurationError(f"SCENARIO_{field.upper()}")
        return value

    def allow_list(self, whitelist_name: str) -> AllowList:
        field = whitelist_name.lower()
        identifiers = getattr(self.settings, field, None)
        if identifiers is None:
            raise ConfigurationError(f"SCENARIO_{whitelist_name.upper()}")
        return AllowList.of(whitelist_name, identifiers)

    def channel_enabled(self, channel: NotifyChannel) -> bool:
        if channel is NotifyChannel.EMAIL:
            return self.settings.email_enabled
        return self.settings.sms_enabled
