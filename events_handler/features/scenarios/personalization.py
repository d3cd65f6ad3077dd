"""Placeholder maps for notification templates.

Every call returns a new dict. Nothing here is shared between events.

Placeholders:
    klant.voornaam               first name
    klant.voorvoegselAchternaam  surname prefix ("van", "de", ...)
    klant.achternaam             surname
    zaak.identificatie           case identification
    zaak.omschrijving            case name
    status.omschrijving          latest status description (status scenarios)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from events_handler.features.notify.models import NotifyChannel, PersonalizationMap
    from events_handler.features.querying.models import Case, CommonPartyData


def build_personalization(
    channel: NotifyChannel,
    party_data: CommonPartyData,
    case: Case,
    extra: Mapping[str, Any] | None = None,
) -> PersonalizationMap:
    """Build a fresh placeholder map for one event and one channel.

    Email and SMS templates currently share the same placeholders; ``channel``
    is accepted so that templates can diverge without changing callers.
    """
    personalization: PersonalizationMap = {
        "klant.voornaam": party_data.name,
        "klant.voorvoegselAchternaam": party_data.surname_prefix,
        "klant.achternaam": party_data.surname,
        "zaak.identificatie": case.identification,
        "zaak.omschrijving": case.name,
    }
    if extra:
        personalization.update(extra)
    return personalization
