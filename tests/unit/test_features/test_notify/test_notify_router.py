"""Tests for the operator test endpoints."""

from __future__ import annotations

import pytest

from events_handler.features.notify import NotifyChannel, Template
from factories import CASE_URL, CONTACT_MOMENT_URL, EMAIL_TEMPLATE_ID, SMS_TEMPLATE_ID


@pytest.fixture
def provider(notify_client):
    notify_client.base_url = "https://api.notify.example"
    notify_client.health_check.return_value = True
    notify_client.list_templates.return_value = [
        Template(id=SMS_TEMPLATE_ID, type=NotifyChannel.SMS, name="Status")
    ]
    return notify_client


@pytest.mark.asyncio
async def test_health_check(http_client, provider) -> None:
    response = await http_client.get("/test/notify/health-check")

    assert response.status_code == 200
    assert response.json() == {"healthy": True, "base_url": "https://api.notify.example"}


@pytest.mark.asyncio
async def test_unhealthy_provider(http_client, provider) -> None:
    provider.health_check.return_value = False

    response = await http_client.get("/test/notify/health-check")

    assert response.status_code == 503
    assert response.json()["healthy"] is False


@pytest.mark.asyncio
async def test_send_email_with_explicit_template(http_client, provider) -> None:
    response = await http_client.post(
        "/test/notify/send-email",
        json={
            "email_address": "jan@example.nl",
            "template_id": str(EMAIL_TEMPLATE_ID),
            "personalization": {"klant.voornaam": "Jan"},
        },
    )

    assert response.status_code == 202
    assert response.json()["channel"] == "email"
    kwargs = provider.send_notification.await_args.kwargs
    assert kwargs["template_id"] == EMAIL_TEMPLATE_ID
    assert kwargs["personalization"] == {"klant.voornaam": "Jan"}
    provider.list_templates.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_sms_falls_back_to_first_template(http_client, provider) -> None:
    response = await http_client.post("/test/notify/send-sms", json={"phone_number": "0612345678"})

    assert response.status_code == 202
    provider.list_templates.assert_awaited_once_with(NotifyChannel.SMS)
    assert provider.send_notification.await_args.kwargs["template_id"] == SMS_TEMPLATE_ID


@pytest.mark.asyncio
async def test_send_without_any_template_is_not_found(http_client, provider) -> None:
    provider.list_templates.return_value = []

    response = await http_client.post("/test/notify/send-email", json={"email_address": "jan@example.nl"})

    assert response.status_code == 404
    assert response.json()["type"] == "data-not-found"
    provider.send_notification.assert_not_awaited()


@pytest.mark.asyncio
async def test_contact_registration(http_client, party_registry) -> None:
    response = await http_client.post(
        "/test/open/contact-registration",
        json={"reference": CASE_URL, "channel": "sms", "message": "Testbericht"},
    )

    assert response.status_code == 201
    assert response.json() == {
        "reference": CONTACT_MOMENT_URL,
        "status": "delivered",
        "channel": "sms",
    }
    body = party_registry.register_contact_moment.await_args.args[0]
    assert body["tekst"] == "Testbericht"
    assert body["onderwerpLinks"] == [CASE_URL]
