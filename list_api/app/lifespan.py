"""Application lifespan management.

Startup order:
1. Logging
2. Database connectivity check, when a database is configured

Shutdown runs in reverse order.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from list_api.core.settings import get_app_settings, get_db_settings, get_logging_settings
from list_api.infra.database import close_database, init_database
from list_api.infra.logging import setup_logging, shutdown

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app
    app_settings = get_app_settings()
    db_settings = get_db_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    if db_settings.is_configured:
        await init_database()

    yield

    logger.info("Application shutting down")
    await close_database()
    shutdown()
