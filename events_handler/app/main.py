"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from events_handler.app.exception_handlers import configure_exception_handlers
from events_handler.app.lifespan import lifespan
from events_handler.app.router import setup_routers
from events_handler.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        root_path=app_settings.root_path,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Exception handlers first so router errors are rendered as problem details
    configure_exception_handlers(app)

    setup_routers(app, app_settings)

    return app
