"""GraphQL types for saved items.

Entities coming out of the saves feature are Pydantic ``SavedItem``
models; ``SavedItemType.from_entity`` converts them at the resolver
boundary. Timestamps are exposed as epoch seconds under the
``_createdAt``/``_updatedAt``/``_deletedAt`` names gateway entities use.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

import strawberry
from strawberry.types import Info

from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.types.base import PageInfoType
from list_api.features.saves.schemas import (
    ContentType,
    SavedItem,
    SavedItemConnection,
    SavedItemsFilter,
    SavedItemsSort,
    SavedItemStatus,
    SortBy,
    SortOrder,
)

# ============================================================================
# Enums
# ============================================================================

SavedItemStatusEnum = strawberry.enum(SavedItemStatus, name="SavedItemStatus")
SavedItemsSortByEnum = strawberry.enum(SortBy, name="SavedItemsSortBy")
SavedItemsSortOrderEnum = strawberry.enum(SortOrder, name="SavedItemsSortOrder")
SavedItemsContentTypeEnum = strawberry.enum(ContentType, name="SavedItemsContentType")


@strawberry.enum(description="Statuses a saved items connection can be filtered by")
class SavedItemStatusFilter(str, Enum):
    UNREAD = "UNREAD"
    ARCHIVED = "ARCHIVED"
    HIDDEN = "HIDDEN"


@strawberry.enum
class PendingItemStatus(str, Enum):
    RESOLVED = "RESOLVED"
    UNRESOLVED = "UNRESOLVED"


# ============================================================================
# Item Result
# ============================================================================


@strawberry.type(name="Item", description="Parsed content behind a save")
class ItemType:
    given_url: str
    resolved_id: strawberry.ID


@strawberry.type(name="PendingItem", description="A save whose URL has not been parsed yet")
class PendingItemType:
    url: str
    status: PendingItemStatus | None = None


ItemResult = Annotated[ItemType | PendingItemType, strawberry.union("ItemResult")]


# ============================================================================
# Saved Item Type (Output)
# ============================================================================


@strawberry.type(name="SavedItem", description="A URL in a user's list")
class SavedItemType:
    id: strawberry.ID
    resolved_id: strawberry.ID
    url: str
    title: str
    is_favorite: bool
    status: SavedItemStatus
    is_archived: bool
    favorited_at: int | None = None
    archived_at: int | None = None
    created_at: int | None = strawberry.field(name="_createdAt", default=None)
    updated_at: int | None = strawberry.field(name="_updatedAt", default=None)
    deleted_at: int | None = strawberry.field(name="_deletedAt", default=None)

    @classmethod
    def from_entity(cls, save: SavedItem) -> SavedItemType:
        return cls(
            id=strawberry.ID(save.id),
            resolved_id=strawberry.ID(save.resolved_id),
            url=save.url,
            title=save.title,
            is_favorite=save.is_favorite,
            status=save.status,
            is_archived=save.is_archived,
            favorited_at=save.favorited_at,
            archived_at=save.archived_at,
            created_at=save.created_at,
            updated_at=save.updated_at,
            deleted_at=save.deleted_at,
        )

    @strawberry.field(description="Parsed item, or a pending placeholder until it is resolved")
    def item(self) -> ItemResult:
        if int(self.resolved_id) != 0:
            return ItemType(given_url=self.url, resolved_id=self.resolved_id)
        return PendingItemType(url=self.url, status=PendingItemStatus.UNRESOLVED)

    @strawberry.field(description="Tags associated with this save")
    async def tags(
        self,
        info: Info[GraphQLContext, None],
    ) -> list[
        Annotated["TagType", strawberry.lazy("list_api.features.graphql.types.tags")]
    ] | None:
        from list_api.features.graphql.types.tags import TagType

        tags = await info.context.loaders.tags_by_saved_item.load(str(self.id))
        return [TagType.from_entity(tag) for tag in tags]


@strawberry.type(name="SavedItemEdge")
class SavedItemEdge:
    cursor: str
    node: SavedItemType


@strawberry.type(name="SavedItemConnection", description="A page of saved items")
class SavedItemConnectionType:
    edges: list[SavedItemEdge]
    page_info: PageInfoType
    total_count: int

    @strawberry.field
    def nodes(self) -> list[SavedItemType]:
        return [edge.node for edge in self.edges]

    @classmethod
    def from_connection(cls, connection: SavedItemConnection) -> SavedItemConnectionType:
        return cls(
            edges=[
                SavedItemEdge(cursor=edge.cursor, node=SavedItemType.from_entity(edge.node))
                for edge in connection.edges
            ],
            page_info=PageInfoType.from_page_info(connection.page_info),
            total_count=connection.total_count,
        )


# ============================================================================
# Input Types
# ============================================================================


@strawberry.input(name="SavedItemsFilter", description="All set fields must match")
class SavedItemsFilterInput:
    updated_since: int | None = strawberry.field(
        default=None, description="Only saves updated after this epoch second"
    )
    is_favorite: bool | None = None
    is_archived: bool | None = None
    tag_names: list[str] | None = strawberry.field(
        default=None, description="Any of these tags; _untagged_ matches saves without tags"
    )
    is_highlighted: bool | None = None
    content_type: SavedItemsContentTypeEnum | None = None
    status: SavedItemStatusFilter | None = None
    states: list[SavedItemStatusFilter] | None = None

    def to_filter(self) -> SavedItemsFilter:
        return SavedItemsFilter(
            updated_since=self.updated_since,
            is_favorite=self.is_favorite,
            is_archived=self.is_archived,
            tag_names=self.tag_names,
            is_highlighted=self.is_highlighted,
            content_type=self.content_type,
            status=SavedItemStatus(self.status.value) if self.status else None,
            states=(
                [SavedItemStatus(state.value) for state in self.states]
                if self.states is not None
                else None
            ),
        )


@strawberry.input(name="SavedItemsSort")
class SavedItemsSortInput:
    sort_by: SavedItemsSortByEnum = SortBy.CREATED_AT
    sort_order: SavedItemsSortOrderEnum = SortOrder.DESC

    def to_sort(self) -> SavedItemsSort:
        return SavedItemsSort(sort_by=self.sort_by, sort_order=self.sort_order)


__all__ = [
    "ItemType",
    "PendingItemStatus",
    "PendingItemType",
    "SavedItemConnectionType",
    "SavedItemEdge",
    "SavedItemStatusFilter",
    "SavedItemType",
    "SavedItemsFilterInput",
    "SavedItemsSortInput",
]
