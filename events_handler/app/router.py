"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from events_handler.core.settings import get_app_settings
from events_handler.features.events.router import router as events_router
from events_handler.features.metrics.router import router as metrics_router
from events_handler.features.notify.router import router as test_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from events_handler.core.settings import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override.
    """
    app_settings = app_settings or get_app_settings()

    # Metrics endpoint (accessible at /metrics)
    app.include_router(metrics_router, tags=["observability"])

    app.include_router(events_router)

    if app_settings.enable_test_endpoints:
        app.include_router(test_router)

    logger.info(
        "Router setup complete",
        extra={"test_endpoints_enabled": app_settings.enable_test_endpoints},
    )
