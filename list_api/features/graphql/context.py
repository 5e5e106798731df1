"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- The authenticated user id and calling API id (from gateway headers)
- A database session shared by the DataLoaders
- A session factory; every paginated fetch opens its own session so
  temporary tables of concurrent fetches never meet on one connection
- DataLoaders (for N+1 prevention)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from list_api.features.graphql.dataloaders import DataLoaders


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Example usage in resolver:
        @strawberry.field
        async def saved_item_by_id(self, info: Info[GraphQLContext, None], id: strawberry.ID):
            save = await info.context.loaders.saved_items_by_id.load(str(id))
            return SavedItemType.from_entity(save) if save else None
    """

    # Standard Strawberry/FastAPI context fields
    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    # Custom application fields
    user_id: int = 0
    api_id: str = "0"
    session: AsyncSession = field(default=None)  # type: ignore[assignment]
    session_factory: async_sessionmaker[AsyncSession] = field(default=None)  # type: ignore[assignment]
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]


__all__ = ["GraphQLContext"]
