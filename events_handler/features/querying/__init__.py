"""Query composition over the case and party registries."""

from __future__ import annotations

from events_handler.features.querying.clients import CaseRegistryClient, PartyRegistryClient
from events_handler.features.querying.context import DataQueryService, QueryContext
from events_handler.features.querying.models import (
    Case,
    CaseStatus,
    CaseType,
    CommonPartyData,
    DistributionChannel,
)

__all__ = [
    "Case",
    "CaseRegistryClient",
    "CaseStatus",
    "CaseType",
    "CommonPartyData",
    "DataQueryService",
    "DistributionChannel",
    "PartyRegistryClient",
    "QueryContext",
]
