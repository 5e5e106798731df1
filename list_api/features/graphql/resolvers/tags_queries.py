"""Query resolvers for tags.

Provides read operations for tags:
- tags(pagination): the user's tags in name order
- tag(name): a single tag by name
"""

from __future__ import annotations

import logging

import strawberry
from strawberry.types import Info

from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.resolvers.saves_queries import PaginationArg
from list_api.features.graphql.types.tags import TagConnectionType, TagType
from list_api.features.tags.service import TagDataService

logger = logging.getLogger(__name__)


async def tags_query(
    info: Info[GraphQLContext, None],
    pagination: PaginationArg = None,
) -> TagConnectionType:
    """List the user's tags with Relay-style cursor pagination.

    Args:
        info: Strawberry info with context
        pagination: first/after or last/before; cursors are tag ids

    Returns:
        TagConnection with edges, pageInfo and totalCount
    """
    ctx = info.context
    connection = await TagDataService(ctx.session, ctx.user_id).get_tags_by_user(
        pagination.to_pagination() if pagination else None
    )
    return TagConnectionType.from_connection(connection)


async def tag_query(
    info: Info[GraphQLContext, None],
    name: str | None = None,
    id: strawberry.ID | None = None,
) -> TagType | None:
    """Get a single tag by name or id.

    Returns:
        TagType if the user has the tag, None otherwise
    """
    ctx = info.context
    service = TagDataService(ctx.session, ctx.user_id)
    if name is not None:
        tag = await service.get_tag_by_name(name)
    elif id is not None:
        tag = await service.get_tag_by_id(str(id))
    else:
        return None
    return TagType.from_entity(tag) if tag else None


__all__ = ["tag_query", "tags_query"]
