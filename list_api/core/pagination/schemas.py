"""Pagination request and response schemas.

Responses follow the GraphQL Connection pattern (Relay specification):
edges carry a node and its cursor, ``page_info`` carries navigation
metadata and ``total_count`` the (bounded) size of the filtered set.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationInput(BaseModel):
    """Pagination arguments of a connection field.

    Exactly one direction is used per request: ``first``/``after`` pages
    forward, ``last``/``before`` pages backward.
    """

    first: int | None = Field(default=None, description="Page size, forward")
    after: str | None = Field(default=None, description="Cursor to start after")
    last: int | None = Field(default=None, description="Page size, backward")
    before: str | None = Field(default=None, description="Cursor to end before")

    model_config = {"frozen": True}

    @property
    def is_backward(self) -> bool:
        """True when the request pages backward with ``last``."""
        return self.last is not None

    @property
    def page_size(self) -> int:
        """Requested page size in whichever direction is active."""
        size = self.last if self.is_backward else self.first
        if size is None:
            raise ValueError("Pagination input has no page size; validate it first")
        return size

    @property
    def cursor(self) -> str | None:
        """Cursor of the active direction, if any."""
        return self.before if self.is_backward else self.after


class PageInfo(BaseModel):
    """Pagination metadata following GraphQL Relay specification.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
    """

    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")


class Edge(BaseModel, Generic[T]):
    """Edge wrapper for paginated items (Relay pattern)."""

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")


class Connection(BaseModel, Generic[T]):
    """GraphQL Connection pattern for cursor pagination.

    Client navigation:
        # First page
        savedItems(pagination: {first: 10})
        # Next page (using end_cursor from previous response)
        savedItems(pagination: {first: 10, after: "MTIzNF8qXzE2MDAwMDAwMDA="})
        # Previous page (using start_cursor)
        savedItems(pagination: {last: 10, before: "MTIzNF8qXzE2MDAwMDAwMDA="})
    """

    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(description="Pagination metadata")
    total_count: int = Field(default=0, description="Size of the filtered set (bounded)")

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]


__all__ = ["Connection", "Edge", "PageInfo", "PaginationInput"]
