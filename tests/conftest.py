"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolated environment and cache resets
    - Upstream Fixtures: AsyncMock registries and provider client
    - Pipeline Fixtures: pipeline wired to the mocks, HTTP client against the app

Domain builders live in ``factories.py``.
"""

from __future__ import annotations

from datetime import UTC, datetime
import os
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from events_handler.app.main import create_app
from events_handler.core.settings import ScenarioSettings, clear_all_caches
from events_handler.features.events.dependencies import set_pipeline
from events_handler.features.events.pipeline import NotificationPipeline
from events_handler.features.events.schemas import NotificationEvent
from events_handler.features.notify.client import NotifyClient
from events_handler.features.notify.dispatch import NotificationDispatcher
from events_handler.features.notify.models import DeliveryReceipt
from events_handler.features.notify.telemetry import CompletionReporter
from events_handler.features.querying import DataQueryService
from events_handler.features.querying.clients import CaseRegistryClient, PartyRegistryClient
from events_handler.features.scenarios import ScenarioConfiguration
from factories import (
    CONTACT_MOMENT_URL,
    make_case,
    make_case_type,
    make_event,
    make_party,
    make_scenario_settings,
    make_status,
)

# Ensure tests run without external infrastructure
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Every test starts and ends with freshly loaded settings."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def scenario_settings() -> ScenarioSettings:
    return make_scenario_settings()


@pytest.fixture
def event() -> NotificationEvent:
    return make_event()


# ============================================================================
# Upstream Fixtures
# ============================================================================


@pytest.fixture
def case_registry() -> AsyncMock:
    """Case registry answering the happy path for case type T-9."""
    registry = AsyncMock(spec=CaseRegistryClient)
    registry.get_case_statuses.return_value = [make_status()]
    registry.get_case_type.return_value = make_case_type()
    registry.get_case.return_value = make_case()
    registry.get_citizen_ref.return_value = "999993653"
    return registry


@pytest.fixture
def party_registry() -> AsyncMock:
    """Party registry returning Jan Jansen and storing every contact moment."""
    registry = AsyncMock(spec=PartyRegistryClient)
    registry.api_version = "v1"
    registry.get_party_data.return_value = make_party()
    registry.register_contact_moment.return_value = {"url": CONTACT_MOMENT_URL}
    return registry


@pytest.fixture
def notify_client() -> AsyncMock:
    """Provider client accepting every notification."""
    client = AsyncMock(spec=NotifyClient)

    async def send_notification(channel, contact_details, template_id, personalization, reference=None):
        return DeliveryReceipt(
            notification_id="n-1",
            channel=channel,
            template_id=template_id,
            reference=reference,
            personalization=dict(personalization),
            sent_at=datetime.now(UTC),
        )

    client.send_notification.side_effect = send_notification
    return client


# ============================================================================
# Pipeline Fixtures
# ============================================================================


@pytest.fixture
def pipeline(scenario_settings, case_registry, party_registry, notify_client) -> NotificationPipeline:
    return NotificationPipeline(
        configuration=ScenarioConfiguration(scenario_settings),
        data_query=DataQueryService(case_registry, party_registry),
        dispatcher=NotificationDispatcher(notify_client),
        reporter=CompletionReporter(party_registry, "123456789"),
    )


@pytest_asyncio.fixture
async def http_client(pipeline, monkeypatch):
    """HTTP client against a fresh app with the mocked pipeline installed."""
    monkeypatch.setenv("APP_ENABLE_TEST_ENDPOINTS", "true")
    clear_all_caches()
    set_pipeline(pipeline)
    transport = httpx.ASGITransport(app=create_app(), raise_app_exceptions=False)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        set_pipeline(None)
