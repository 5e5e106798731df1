"""Base GraphQL types for pagination.

Mirror the core pagination schemas as Strawberry types.
"""

from __future__ import annotations

import strawberry

from list_api.core.pagination import PageInfo, PaginationInput


@strawberry.type(
    name="PageInfo",
    description="Pagination metadata following GraphQL Relay specification",
)
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination.

    Mirrors list_api.core.pagination.schemas.PageInfo.
    """

    has_previous_page: bool = strawberry.field(description="Whether previous items exist")
    has_next_page: bool = strawberry.field(description="Whether more items exist")
    start_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the last item",
    )

    @classmethod
    def from_page_info(cls, page_info: PageInfo) -> PageInfoType:
        return cls(
            has_previous_page=page_info.has_previous_page,
            has_next_page=page_info.has_next_page,
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
        )


@strawberry.input(
    name="PaginationInput",
    description="Set either {first, after} to page forward or {last, before} to page backward",
)
class PaginationInputType:
    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None

    def to_pagination(self) -> PaginationInput:
        return PaginationInput(
            first=self.first,
            after=self.after,
            last=self.last,
            before=self.before,
        )


__all__ = ["PageInfoType", "PaginationInputType"]
