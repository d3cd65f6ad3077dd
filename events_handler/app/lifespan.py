"""Application lifespan management.

Startup Order:
1. Core (logging, metrics)
2. Notification pipeline (HTTP clients for the registries and the provider)

Shutdown Order: Reverse of startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from events_handler.core.settings import get_settings
from events_handler.features.events.dependencies import get_pipeline, set_pipeline
from events_handler.features.events.pipeline import NotificationPipeline
from events_handler.infra.logging.config import setup_logging, shutdown
from events_handler.infra.metrics.prometheus import application_info

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Initialize logging and the application info metric."""
    settings = get_settings()
    app = settings.app

    setup_logging(log_settings=settings.logging, force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )

    application_info.labels(
        version=app.version,
        service=app.service_name,
        environment=app.environment,
    ).set(1)


async def _startup_pipeline() -> None:
    """Create the shared pipeline unless one was installed already (tests)."""
    if get_pipeline() is not None:
        return

    settings = get_settings()
    set_pipeline(NotificationPipeline.from_settings(settings))
    logger.info(
        "Notification pipeline initialized",
        extra={
            "party_registry_api": settings.party_registry.api_version,
            "email_enabled": settings.scenarios.email_enabled,
            "sms_enabled": settings.scenarios.sms_enabled,
        },
    )


async def _shutdown_pipeline() -> None:
    pipeline = get_pipeline()
    if pipeline is None:
        return
    try:
        await pipeline.close()
    except Exception:
        logger.exception("Error while closing pipeline clients")
    finally:
        set_pipeline(None)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    await _startup_core()
    await _startup_pipeline()

    logger.info("Application startup complete")

    yield

    logger.info("Application shutting down")
    await _shutdown_pipeline()
    logger.info("Application shutdown complete")
    shutdown()
