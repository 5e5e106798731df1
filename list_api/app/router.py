"""Route registration: GraphQL, Prometheus scrape endpoint and health."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from list_api.infra.metrics import REGISTRY

if TYPE_CHECKING:
    from fastapi import FastAPI

    from list_api.core.settings import AppSettings, GraphQLSettings

logger = logging.getLogger(__name__)

observability_router = APIRouter(tags=["observability"])


@observability_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


@observability_router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings,
    graphql_settings: GraphQLSettings,
) -> None:
    """Include all routers on ``app``."""
    app.include_router(observability_router)

    if graphql_settings.enabled:
        from list_api.features.graphql.router import create_graphql_router

        app.include_router(create_graphql_router(), prefix=graphql_settings.path)
        logger.info(
            "GraphQL endpoint enabled",
            extra={"path": graphql_settings.path, "service": app_settings.service_name},
        )
