"""Tests for the scenario configuration provider."""

from __future__ import annotations

import pytest

from events_handler.core.exceptions import ConfigurationError
from events_handler.features.notify.models import NotifyChannel
from events_handler.features.scenarios import ScenarioConfiguration
from factories import EMAIL_TEMPLATE_ID, SMS_TEMPLATE_ID, make_scenario_settings


def test_template_ids_by_scenario_and_channel() -> None:
    configuration = ScenarioConfiguration(make_scenario_settings())

    assert configuration.template_id("case_created", NotifyChannel.EMAIL) == EMAIL_TEMPLATE_ID
    assert configuration.template_id("case_closed", NotifyChannel.SMS) == SMS_TEMPLATE_ID


def test_missing_template_names_the_setting() -> None:
    configuration = ScenarioConfiguration(
        make_scenario_settings(case_closed_sms_template_id=None)
    )

    with pytest.raises(ConfigurationError) as exc_info:
        configuration.template_id("case_closed", NotifyChannel.SMS)

    assert exc_info.value.key == "SCENARIO_CASE_CLOSED_SMS_TEMPLATE_ID"


def test_allow_list_by_whitelist_name() -> None:
    configuration = ScenarioConfiguration(make_scenario_settings(zaakupdate_ids=["T-1", "T-2"]))

    allow_list = configuration.allow_list("ZAAKUPDATE_IDS")

    assert allow_list.name == "ZAAKUPDATE_IDS"
    assert allow_list.identifiers == frozenset({"t-1", "t-2"})


def test_unconfigured_allow_list_is_configuration_error() -> None:
    configuration = ScenarioConfiguration(make_scenario_settings(zaakclose_ids=None))

    with pytest.raises(ConfigurationError) as exc_info:
        configuration.allow_list("ZAAKCLOSE_IDS")

    assert exc_info.value.key == "SCENARIO_ZAAKCLOSE_IDS"


def test_channel_toggles() -> None:
    configuration = ScenarioConfiguration(make_scenario_settings(sms_enabled=False))

    assert configuration.channel_enabled(NotifyChannel.EMAIL)
    assert not configuration.channel_enabled(NotifyChannel.SMS)
