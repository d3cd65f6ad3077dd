"""Tests for the eligibility gate."""

from __future__ import annotations

import pytest

from events_handler.core.exceptions import NotificationsDisabled, NotWhitelisted
from events_handler.features.scenarios import (
    AllowList,
    validate_notify_permitted,
    validate_whitelisted,
)


class TestAllowList:
    def test_wildcard_allows_everything(self) -> None:
        assert AllowList.of("ZAAKCREATE_IDS", ["*"]).is_allowed("anything")

    def test_matching_ignores_case_and_whitespace(self) -> None:
        allow_list = AllowList.of("ZAAKCREATE_IDS", [" T-9 ", "t-10"])

        assert allow_list.is_allowed("t-9")
        assert allow_list.is_allowed("T-10 ")
        assert not allow_list.is_allowed("T-11")

    def test_blank_entries_are_dropped(self) -> None:
        assert AllowList.of("ZAAKCREATE_IDS", ["", "  "]).identifiers == frozenset()

    def test_empty_list_allows_nothing(self) -> None:
        assert not AllowList.of("ZAAKCREATE_IDS", []).is_allowed("T-9")


def test_not_whitelisted_names_case_type_and_list() -> None:
    with pytest.raises(NotWhitelisted) as exc_info:
        validate_whitelisted(AllowList.of("ZAAKUPDATE_IDS", ["T-1"]), "T-9", "ZAAKUPDATE_IDS")

    assert exc_info.value.case_type_id == "T-9"
    assert exc_info.value.whitelist_name == "ZAAKUPDATE_IDS"
    assert exc_info.value.reason == "NotWhitelisted"


def test_whitelisted_case_type_passes() -> None:
    validate_whitelisted(AllowList.of("ZAAKUPDATE_IDS", ["T-9"]), "T-9", "ZAAKUPDATE_IDS")


def test_notify_permitted() -> None:
    validate_notify_permitted(True)
    with pytest.raises(NotificationsDisabled):
        validate_notify_permitted(False)
