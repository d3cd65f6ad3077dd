"""Per-event query composition over the upstream registries.

``DataQueryService`` is process-wide and owns the shared CaseType cache;
``QueryContext`` is created per event and must not outlive it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from events_handler.core.exceptions import DataNotFound
from events_handler.infra.cache import SingleFlightCache

if TYPE_CHECKING:
    from collections.abc import Sequence

    from events_handler.features.events.schemas import NotificationEvent
    from events_handler.features.querying.clients import (
        CaseRegistryClient,
        PartyRegistryClient,
    )
    from events_handler.features.querying.models import (
        Case,
        CaseStatus,
        CaseType,
        CommonPartyData,
    )

logger = logging.getLogger(__name__)


class QueryContext:
    """Upstream queries bound to one event's case reference."""

    def __init__(
        self,
        event: NotificationEvent,
        case_registry: CaseRegistryClient,
        party_registry: PartyRegistryClient,
        case_type_cache: SingleFlightCache[str, CaseType],
    ) -> None:
        self.event = event
        self.case_ref = event.reference
        self._case_registry = case_registry
        self._party_registry = party_registry
        self._case_type_cache = case_type_cache

    async def case_statuses(self) -> list[CaseStatus]:
        """Statuses of the event's case, oldest first."""
        return await self._case_registry.get_case_statuses(self.case_ref)

    async def last_case_type(self, statuses: Sequence[CaseStatus]) -> CaseType:
        """Resolve the case type of the most recent status through the shared cache.

        Raises:
            DataNotFound: The case has no statuses yet.
        """
        if not statuses:
            raise DataNotFound("The case has no statuses", instance=self.case_ref)

        latest = max(statuses, key=lambda status: status.occurred_at)
        case_type_ref = latest.case_type_ref
        return await self._case_type_cache.get_or_fetch(
            case_type_ref,
            lambda: self._case_registry.get_case_type(case_type_ref),
        )

    async def party_data(self) -> CommonPartyData:
        """Contact data of the citizen linked to the case."""
        citizen_ref = await self._case_registry.get_citizen_ref(self.case_ref)
        return await self._party_registry.get_party_data(citizen_ref)

    async def case(self) -> Case:
        """Display attributes of the case (never cached)."""
        return await self._case_registry.get_case(self.case_ref)


class DataQueryService:
    """Factory of per-event query contexts sharing one CaseType cache."""

    def __init__(
        self,
        case_registry: CaseRegistryClient,
        party_registry: PartyRegistryClient,
        case_type_cache: SingleFlightCache[str, CaseType] | None = None,
    ) -> None:
        self.case_registry = case_registry
        self.party_registry = party_registry
        self.case_type_cache = case_type_cache or SingleFlightCache(name="case_type")

    def from_event(self, event: NotificationEvent) -> QueryContext:
        return QueryContext(
            event=event,
            case_registry=self.case_registry,
            party_registry=self.party_registry,
            case_type_cache=self.case_type_cache,
        )

    async def close(self) -> None:
        await self.case_registry.close()
        await self.party_registry.close()
