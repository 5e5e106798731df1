"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from list_api.app.exception_handlers import configure_exception_handlers
from list_api.app.lifespan import lifespan
from list_api.app.middleware import configure_middleware
from list_api.app.router import setup_routers
from list_api.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=None,
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Exception handlers before middleware
    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app, app_settings, settings.graphql)

    return app
