"""Scenario strategies, their registry and the validation gate."""

from events_handler.features.scenarios.base import CaseScenario, NotifyScenario, ScenarioContext
from events_handler.features.scenarios.cases import (
    CaseClosedScenario,
    CaseCreatedScenario,
    CaseStatusUpdatedScenario,
)
from events_handler.features.scenarios.configuration import ScenarioConfiguration
from events_handler.features.scenarios.personalization import build_personalization
from events_handler.features.scenarios.registry import ScenarioRegistry, scenario_registry
from events_handler.features.scenarios.validation import (
    AllowList,
    validate_notify_permitted,
    validate_whitelisted,
)

__all__ = [
    "AllowList",
    "CaseClosedScenario",
    "CaseCreatedScenario",
    "CaseScenario",
    "CaseStatusUpdatedScenario",
    "NotifyScenario",
    "ScenarioConfiguration",
    "ScenarioContext",
    "ScenarioRegistry",
    "build_personalization",
    "scenario_registry",
    "validate_notify_permitted",
    "validate_whitelisted",
]
