"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint (mounted with prefix by app/router.py)
- GraphQL IDE on GET requests, when enabled
- Request context with the caller's identity, sessions and DataLoaders
- Error formatting with structured codes
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, cast

from fastapi import BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from strawberry.fastapi import GraphQLRouter
from strawberry.http import process_result

from list_api.core.dependencies import (
    get_api_id,
    get_db_session,
    get_session_factory,
    get_user_id,
)
from list_api.core.settings import get_graphql_settings
from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.dataloaders import create_dataloaders
from list_api.features.graphql.error_handler import process_graphql_errors
from list_api.features.graphql.schema import schema

if TYPE_CHECKING:
    from strawberry.http import GraphQLHTTPResponse
    from strawberry.types import ExecutionResult

logger = logging.getLogger(__name__)


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    user_id: Annotated[int, Depends(get_user_id)],
    api_id: Annotated[str, Depends(get_api_id)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Args:
        request: FastAPI request
        response: FastAPI response (for setting headers/cookies)
        background_tasks: FastAPI background tasks
        user_id: Authenticated user from the ``userid`` header
        api_id: Calling application from the ``apiid`` header
        session: Request-scoped session for DataLoaders
        session_factory: Factory for per-fetch pagination sessions

    Returns:
        GraphQLContext for use in resolvers
    """
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        user_id=user_id,
        api_id=api_id,
        session=session,
        session_factory=session_factory,
        loaders=create_dataloaders(session, user_id),
    )


class ListGraphQLRouter(GraphQLRouter):
    """GraphQLRouter that formats errors with structured codes."""

    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        data = process_result(result)
        if result.errors:
            data["errors"] = process_graphql_errors(result.errors)
        return data


def create_graphql_router() -> ListGraphQLRouter:
    """Create GraphQL router with settings-based configuration."""
    settings = get_graphql_settings()

    graphql_app = ListGraphQLRouter(
        schema,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
    )
    # Routes sit at the router root; app/router.py mounts it at settings.path
    logger.debug("GraphQL router created", extra={"path": settings.path})
    return graphql_app


__all__ = ["ListGraphQLRouter", "create_graphql_router", "get_graphql_context"]
