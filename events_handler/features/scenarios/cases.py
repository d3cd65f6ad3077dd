"""Case scenarios: created, status updated, closed."""

from __future__ import annotations

from events_handler.features.events.schemas import EventAction, SubjectType
from events_handler.features.scenarios.base import CaseScenario
from events_handler.features.scenarios.registry import scenario_registry


@scenario_registry.register(SubjectType.CASE, EventAction.CREATED)
class CaseCreatedScenario(CaseScenario):
    """A new case was opened for the citizen."""

    key = "case_created"
    whitelist = "ZAAKCREATE_IDS"


class _CaseStatusScenario(CaseScenario):
    """Adds the latest status description to the placeholders."""

    def extra_placeholders(self) -> dict[str, str]:
        statuses = self.context.statuses if self.context else []
        if not statuses:
            return {"status.omschrijving": ""}
        latest = max(statuses, key=lambda status: status.occurred_at)
        return {"status.omschrijving": latest.description or ""}


@scenario_registry.register(SubjectType.CASE, EventAction.UPDATED)
class CaseStatusUpdatedScenario(_CaseStatusScenario):
    key = "case_status_updated"
    whitelist = "ZAAKUPDATE_IDS"


@scenario_registry.register(SubjectType.CASE, EventAction.CLOSED)
class CaseClosedScenario(_CaseStatusScenario):
    key = "case_closed"
    whitelist = "ZAAKCLOSE_IDS"
