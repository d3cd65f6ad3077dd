"""Tests for completion reporting."""

from __future__ import annotations

import pytest

from events_handler.core.exceptions import TelemetryFailed, UpstreamUnavailable
from events_handler.features.notify import CompletionReporter, NotifyChannel
from factories import CASE_URL, CONTACT_MOMENT_URL, make_event


@pytest.mark.asyncio
async def test_v1_contact_moment(party_registry) -> None:
    reporter = CompletionReporter(party_registry, "123456789")

    moment = await reporter.report_completion(make_event(), NotifyChannel.EMAIL, "delivered")

    body = party_registry.register_contact_moment.await_args.args[0]
    assert body["bronorganisatie"] == "123456789"
    assert body["kanaal"] == "email"
    assert body["tekst"] == "Notification delivered"
    assert body["onderwerpLinks"] == [CASE_URL]
    assert moment.reference == CONTACT_MOMENT_URL
    assert moment.status == "delivered"
    assert moment.channel is NotifyChannel.EMAIL


@pytest.mark.asyncio
async def test_v2_contact_moment_without_channel(party_registry) -> None:
    party_registry.api_version = "v2"
    party_registry.register_contact_moment.return_value = {"uuid": "cm-uuid"}
    reporter = CompletionReporter(party_registry, "123456789")

    moment = await reporter.report_completion(make_event(), None, "failed", "Registry timed out")

    body = party_registry.register_contact_moment.await_args.args[0]
    assert body["kanaal"] == "onbekend"
    assert body["inhoud"] == "Registry timed out"
    assert body["indicatieContactGelukt"] is False
    assert moment.reference == "cm-uuid"
    assert moment.channel is None


@pytest.mark.asyncio
async def test_registry_failure_is_telemetry_failed(party_registry) -> None:
    party_registry.register_contact_moment.side_effect = UpstreamUnavailable("openklant down")
    reporter = CompletionReporter(party_registry, "123456789")

    with pytest.raises(TelemetryFailed) as exc_info:
        await reporter.report_completion(make_event(), NotifyChannel.SMS, "delivered")

    assert exc_info.value.extra["cause"] == "UpstreamUnavailable"
    assert exc_info.value.instance == CASE_URL


@pytest.mark.asyncio
async def test_contact_moment_without_identifier_is_telemetry_failed(party_registry) -> None:
    party_registry.register_contact_moment.return_value = {}
    reporter = CompletionReporter(party_registry, "123456789")

    with pytest.raises(TelemetryFailed):
        await reporter.report_completion(make_event(), NotifyChannel.EMAIL, "delivered")
