"""Tests for the FastAPI application factory and lifespan."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from events_handler.app.main import create_app
from events_handler.core.settings import clear_all_caches
from events_handler.features.events.dependencies import get_pipeline, set_pipeline


def _paths(app) -> set[str]:
    return {route.path for route in app.routes}


def test_routes_are_mounted() -> None:
    paths = _paths(create_app())

    assert "/events/listen" in paths
    assert "/metrics" in paths
    assert "/test/notify/send-email" in paths
    assert "/test/open/contact-registration" in paths


def test_test_endpoints_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENABLE_TEST_ENDPOINTS", "false")
    clear_all_caches()

    paths = _paths(create_app())

    assert "/events/listen" in paths
    assert "/test/notify/health-check" not in paths


def test_lifespan_creates_and_closes_the_pipeline() -> None:
    set_pipeline(None)

    with TestClient(create_app()) as client:
        assert get_pipeline() is not None
        response = client.get("/metrics")

    assert response.status_code == 200
    assert "application_info" in response.text
    assert get_pipeline() is None


def test_lifespan_keeps_an_installed_pipeline(pipeline) -> None:
    set_pipeline(pipeline)
    try:
        with TestClient(create_app()):
            assert get_pipeline() is pipeline
    finally:
        set_pipeline(None)
