"""Scenario contract and the shared case-scenario data preparation."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from events_handler.features.notify.models import NotifyChannel
from events_handler.features.scenarios.personalization import build_personalization
from events_handler.features.scenarios.validation import (
    validate_notify_permitted,
    validate_whitelisted,
)

if TYPE_CHECKING:
    from uuid import UUID

    from events_handler.features.events.schemas import NotificationEvent
    from events_handler.features.notify.models import PersonalizationMap
    from events_handler.features.querying.context import DataQueryService, QueryContext
    from events_handler.features.querying.models import (
        Case,
        CaseStatus,
        CaseType,
        CommonPartyData,
    )
    from events_handler.features.scenarios.configuration import ScenarioConfiguration

logger = logging.getLogger(__name__)


@dataclass
class ScenarioContext:
    """Everything one in-flight event has resolved so far. Never shared."""

    event: NotificationEvent
    statuses: list[CaseStatus] = field(default_factory=list)
    case_type: CaseType | None = None
    case: Case | None = None
    party_data: CommonPartyData | None = None


class NotifyScenario(ABC):
    """Behaviour for one event subject/action pair.

    A new instance is created for every event, so instance state is
    event-scoped.
    """

    key: ClassVar[str]
    whitelist: ClassVar[str]

    def __init__(
        self,
        configuration: ScenarioConfiguration,
        data_query: DataQueryService,
    ) -> None:
        self.configuration = configuration
        self.data_query = data_query
        self.context: ScenarioContext | None = None

    @abstractmethod
    async def prepare_data(self, event: NotificationEvent) -> CommonPartyData:
        """Fetch and validate everything needed, returning the party to notify."""

    @abstractmethod
    def email_personalization(self, party_data: CommonPartyData) -> PersonalizationMap: ...

    @abstractmethod
    def sms_personalization(self, party_data: CommonPartyData) -> PersonalizationMap: ...

    def email_template_id(self) -> UUID:
        return self.configuration.template_id(self.key, NotifyChannel.EMAIL)

    def sms_template_id(self) -> UUID:
        return self.configuration.template_id(self.key, NotifyChannel.SMS)

    def whitelist_name(self) -> str:
        return self.whitelist

    def template_id(self, channel: NotifyChannel) -> UUID:
        if channel is NotifyChannel.EMAIL:
            return self.email_template_id()
        return self.sms_template_id()

    def personalization(self, channel: NotifyChannel, party_data: CommonPartyData) -> PersonalizationMap:
        if channel is NotifyChannel.EMAIL:
            return self.email_personalization(party_data)
        return self.sms_personalization(party_data)


class CaseScenario(NotifyScenario):
    """Shared flow for case events.

    Statuses are fetched first because the case type hangs off the latest
    one. The party and the case itself do not depend on the case type, so
    they are fetched concurrently with it. The allow-list and the case type's
    notification flag are checked once the case type is known; a rejection
    wins over any failure of the concurrent party/case lookups.
    """

    async def prepare_data(self, event: NotificationEvent) -> CommonPartyData:
        query = self.data_query.from_event(event)
        context = ScenarioContext(event=event)
        self.context = context

        case_type_result, party_result, case_result = await asyncio.gather(
            self._resolve_case_type(query, context),
            query.party_data(),
            query.case(),
            return_exceptions=True,
        )
        for result in (case_type_result, party_result, case_result):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        if isinstance(case_type_result, Exception):
            raise case_type_result
        context.case_type = case_type_result

        validate_whitelisted(
            self.configuration.allow_list(self.whitelist_name()),
            case_type_result.identification,
            self.whitelist_name(),
        )
        validate_notify_permitted(case_type_result.is_notification_expected)

        if isinstance(party_result, Exception):
            raise party_result
        if isinstance(case_result, Exception):
            raise case_result

        context.party_data = party_result
        context.case = case_result
        logger.debug(
            "Scenario data prepared",
            extra={"scenario": self.key, "case_type": case_type_result.identification},
        )
        return party_result

    async def _resolve_case_type(self, query: QueryContext, context: ScenarioContext) -> CaseType:
        context.statuses = await query.case_statuses()
        return await query.last_case_type(context.statuses)

    def _require_case(self) -> Case:
        if self.context is None or self.context.case is None:
            msg = "prepare_data() must complete before personalization is built"
            raise RuntimeError(msg)
        return self.context.case

    def extra_placeholders(self) -> dict[str, str]:
        """Scenario-specific placeholders added on top of the common ones."""
        return {}

    def email_personalization(self, party_data: CommonPartyData) -> PersonalizationMap:
        return build_personalization(
            NotifyChannel.EMAIL, party_data, self._require_case(), self.extra_placeholders()
        )

    def sms_personalization(self, party_data: CommonPartyData) -> PersonalizationMap:
        return build_personalization(
            NotifyChannel.SMS, party_data, self._require_case(), self.extra_placeholders()
        )
