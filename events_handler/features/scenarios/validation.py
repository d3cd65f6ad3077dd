"""Eligibility gate run before any personalization or dispatch."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from events_handler.core.exceptions import NotificationsDisabled, NotWhitelisted

WILDCARD = "*"


@dataclass(frozen=True)
class AllowList:
    """Case-type identifications permitted to trigger a scenario.

    Matching ignores case and surrounding whitespace; ``*`` allows everything.
    """

    name: str
    identifiers: frozenset[str]

    @classmethod
    def of(cls, name: str, identifiers: Iterable[str]) -> AllowList:
        return cls(
            name=name,
            identifiers=frozenset(item.strip().casefold() for item in identifiers if item.strip()),
        )

    def is_allowed(self, case_type_id: str) -> bool:
        if WILDCARD in self.identifiers:
            return True
        return case_type_id.strip().casefold() in self.identifiers


def validate_whitelisted(allow_list: AllowList, case_type_id: str, whitelist_name: str) -> None:
    """Raise NotWhitelisted unless the case type is on the allow-list."""
    if not allow_list.is_allowed(case_type_id):
        raise NotWhitelisted(case_type_id=case_type_id, whitelist_name=whitelist_name)


def validate_notify_permitted(is_notification_expected: bool) -> None:
    """Raise NotificationsDisabled when the case type does not notify citizens."""
    if not is_notification_expected:
        raise NotificationsDisabled()
