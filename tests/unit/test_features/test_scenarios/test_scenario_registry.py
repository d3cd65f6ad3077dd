"""Tests for scenario registration and resolution."""

from __future__ import annotations

import pytest

from events_handler.core.exceptions import UnsupportedScenario
from events_handler.features.events.schemas import EventAction, SubjectType
from events_handler.features.querying import DataQueryService
from events_handler.features.scenarios import (
    CaseClosedScenario,
    CaseCreatedScenario,
    CaseStatusUpdatedScenario,
    ScenarioConfiguration,
    ScenarioRegistry,
    scenario_registry,
)
from events_handler.features.scenarios.base import CaseScenario
from factories import make_event, make_scenario_settings


@pytest.mark.parametrize(
    ("action", "scenario_cls"),
    [
        (EventAction.CREATED, CaseCreatedScenario),
        (EventAction.UPDATED, CaseStatusUpdatedScenario),
        (EventAction.CLOSED, CaseClosedScenario),
    ],
)
def test_case_events_resolve_to_their_scenario(action, scenario_cls) -> None:
    assert scenario_registry.resolve(make_event(action=action)) is scenario_cls


def test_unregistered_pair_is_unsupported() -> None:
    with pytest.raises(UnsupportedScenario) as exc_info:
        scenario_registry.resolve(make_event(action=EventAction.UNKNOWN))

    assert exc_info.value.subject == SubjectType.CASE.value
    assert exc_info.value.action == EventAction.UNKNOWN.value


def test_duplicate_registration_fails() -> None:
    registry = ScenarioRegistry()

    @registry.register(SubjectType.CASE, EventAction.CREATED)
    class First(CaseScenario):
        key = "first"
        whitelist = "ZAAKCREATE_IDS"

    with pytest.raises(ValueError, match="already registered"):
        registry.register(SubjectType.CASE, EventAction.CREATED)(First)

    assert len(registry) == 1


def test_create_returns_a_fresh_instance_per_event(case_registry, party_registry) -> None:
    configuration = ScenarioConfiguration(make_scenario_settings())
    data_query = DataQueryService(case_registry, party_registry)

    first = scenario_registry.create(make_event(), configuration, data_query)
    second = scenario_registry.create(make_event(), configuration, data_query)

    assert isinstance(first, CaseCreatedScenario)
    assert first is not second
    assert first.context is None


def test_registered_is_a_copy() -> None:
    registered = scenario_registry.registered()
    registered.clear()

    assert len(scenario_registry) == 3
