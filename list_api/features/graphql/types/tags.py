"""GraphQL types for tags."""

from __future__ import annotations

import strawberry
from strawberry.types import Info

from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.resolvers.saves_queries import (
    FilterArg,
    PaginationArg,
    SortArg,
    fetch_saved_items,
)
from list_api.features.graphql.types.base import PageInfoType
from list_api.features.graphql.types.saves import SavedItemConnectionType
from list_api.features.tags.schemas import Tag, TagConnection


@strawberry.type(name="Tag", description="A label a user applies to saves")
class TagType:
    """Tag aggregated over the user's saves.

    ``saved_item_ids`` stays server-side; clients page through the saves
    with ``savedItems``.
    """

    id: strawberry.ID
    name: str
    saved_item_ids: strawberry.Private[list[str]]
    created_at: int | None = strawberry.field(name="_createdAt", default=None)
    updated_at: int | None = strawberry.field(name="_updatedAt", default=None)

    @classmethod
    def from_entity(cls, tag: Tag) -> TagType:
        return cls(
            id=strawberry.ID(tag.id),
            name=tag.name,
            saved_item_ids=list(tag.saved_item_ids),
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )

    @strawberry.field(description="Saves this tag is applied to")
    async def saved_items(
        self,
        info: Info[GraphQLContext, None],
        filter: FilterArg = None,
        sort: SortArg = None,
        pagination: PaginationArg = None,
    ) -> SavedItemConnectionType:
        return await fetch_saved_items(
            info.context,
            filter,
            sort,
            pagination,
            scoping_ids=[int(item_id) for item_id in self.saved_item_ids],
        )


@strawberry.type(name="TagEdge")
class TagEdge:
    cursor: str
    node: TagType


@strawberry.type(name="TagConnection", description="A page of tags")
class TagConnectionType:
    edges: list[TagEdge]
    page_info: PageInfoType
    total_count: int

    @strawberry.field
    def nodes(self) -> list[TagType]:
        return [edge.node for edge in self.edges]

    @classmethod
    def from_connection(cls, connection: TagConnection) -> TagConnectionType:
        return cls(
            edges=[
                TagEdge(cursor=edge.cursor, node=TagType.from_entity(edge.node))
                for edge in connection.edges
            ],
            page_info=PageInfoType.from_page_info(connection.page_info),
            total_count=connection.total_count,
        )


__all__ = ["TagConnectionType", "TagEdge", "TagType"]
