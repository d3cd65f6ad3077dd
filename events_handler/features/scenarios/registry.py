"""Maps (subject, action) pairs to scenario classes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from events_handler.core.exceptions import UnsupportedScenario

if TYPE_CHECKING:
    from collections.abc import Callable

    from events_handler.features.events.schemas import (
        EventAction,
        NotificationEvent,
        SubjectType,
    )
    from events_handler.features.querying.context import DataQueryService
    from events_handler.features.scenarios.base import NotifyScenario
    from events_handler.features.scenarios.configuration import ScenarioConfiguration

logger = logging.getLogger(__name__)

ScenarioType = type["NotifyScenario"]


class ScenarioRegistry:
    """Registry of scenario classes.

    Adding a scenario means registering a new class; the pipeline never
    changes.

    Example:
            registry = ScenarioRegistry()

        @registry.register(SubjectType.CASE, EventAction.CREATED)
        class CaseCreatedScenario(CaseScenario):
            ...
    """

    def __init__(self) -> None:
        self._scenarios: dict[tuple[SubjectType, EventAction], ScenarioType] = {}

    def register(
        self, subject: SubjectType, action: EventAction
    ) -> Callable[[ScenarioType], ScenarioType]:
        def decorator(scenario_cls: ScenarioType) -> ScenarioType:
            key = (subject, action)
            if key in self._scenarios:
                msg = f"A scenario is already registered for {subject.value}/{action.value}"
                raise ValueError(msg)
            self._scenarios[key] = scenario_cls
            return scenario_cls

        return decorator

    def resolve(self, event: NotificationEvent) -> ScenarioType:
        """Return the scenario class for the event.

        Raises:
            UnsupportedScenario: Nothing is registered for the pair.
        """
        scenario_cls = self._scenarios.get((event.subject, event.action))
        if scenario_cls is None:
            raise UnsupportedScenario(event.subject.value, event.action.value)
        return scenario_cls

    def create(
        self,
        event: NotificationEvent,
        configuration: ScenarioConfiguration,
        data_query: DataQueryService,
    ) -> NotifyScenario:
        """Instantiate a fresh scenario for one event."""
        return self.resolve(event)(configuration, data_query)

    def registered(self) -> dict[tuple[SubjectType, EventAction], ScenarioType]:
        return dict(self._scenarios)

    def __len__(self) -> int:
        return len(self._scenarios)


scenario_registry = ScenarioRegistry()
