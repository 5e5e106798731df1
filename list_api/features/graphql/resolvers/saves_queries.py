"""Query resolvers for saved items.

Provides read operations for saves:
- savedItems(filter, sort, pagination): a page of the user's saves
- savedItemById(id): a single save
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import strawberry
from strawberry.types import Info

from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.types.base import PaginationInputType
from list_api.features.graphql.types.saves import (
    SavedItemConnectionType,
    SavedItemsFilterInput,
    SavedItemsSortInput,
    SavedItemType,
)
from list_api.features.saves.service import ListPaginationService

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Type aliases for annotated arguments
FilterArg = Annotated[
    SavedItemsFilterInput | None, strawberry.argument(description="Narrow the saves returned")
]
SortArg = Annotated[
    SavedItemsSortInput | None,
    strawberry.argument(description="Ordering, CREATED_AT DESC when omitted"),
]
PaginationArg = Annotated[
    PaginationInputType | None,
    strawberry.argument(description="Page size and cursor, first 30 when omitted"),
]


async def fetch_saved_items(
    ctx: GraphQLContext,
    filter: SavedItemsFilterInput | None,
    sort: SavedItemsSortInput | None,
    pagination: PaginationInputType | None,
    scoping_ids: Sequence[int] | None = None,
) -> SavedItemConnectionType:
    """Run one paginated fetch on a session of its own.

    Sibling fields may fetch concurrently; separate sessions keep their
    temporary tables on separate connections.
    """
    async with ctx.session_factory() as session:
        connection = await ListPaginationService(session, ctx.user_id).get_page(
            filter=filter.to_filter() if filter else None,
            sort=sort.to_sort() if sort else None,
            pagination=pagination.to_pagination() if pagination else None,
            scoping_ids=scoping_ids,
        )
    return SavedItemConnectionType.from_connection(connection)


async def saved_items_query(
    info: Info[GraphQLContext, None],
    filter: FilterArg = None,
    sort: SortArg = None,
    pagination: PaginationArg = None,
) -> SavedItemConnectionType:
    """Get a page of the user's saves.

    Args:
        info: Strawberry info with context
        filter: Conjunctive filter rules
        sort: Sort column and direction
        pagination: first/after or last/before

    Returns:
        SavedItemConnection with edges, pageInfo and totalCount
    """
    return await fetch_saved_items(info.context, filter, sort, pagination)


async def saved_item_by_id_query(
    info: Info[GraphQLContext, None],
    id: strawberry.ID,
) -> SavedItemType | None:
    """Get a single save by item id.

    Uses DataLoader for efficient batching if called multiple times.
    """
    save = await info.context.loaders.saved_items_by_id.load(str(id))
    if save is None:
        return None
    return SavedItemType.from_entity(save)


async def saved_item_by_url_query(
    info: Info[GraphQLContext, None],
    url: str,
) -> SavedItemType | None:
    """Get a single save by the URL it was saved with."""
    save = await info.context.loaders.saved_items_by_url.load(url)
    if save is None:
        return None
    return SavedItemType.from_entity(save)


__all__ = [
    "fetch_saved_items",
    "saved_item_by_id_query",
    "saved_item_by_url_query",
    "saved_items_query",
]
