"""Schemas for the saved items feature.

Raw rows read from the store are ``ListRow`` values; they are converted
to ``SavedItem`` entities by ``row_to_entity`` / ``rows_to_entities``
before anything outside the data layer touches them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from list_api.core.pagination.schemas import Connection


class SavedItemStatus(str, Enum):
    """Lifecycle state of a save."""

    UNREAD = "UNREAD"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"
    HIDDEN = "HIDDEN"


class SortBy(str, Enum):
    """Timestamp a saved items connection is ordered by."""

    CREATED_AT = "CREATED_AT"
    UPDATED_AT = "UPDATED_AT"
    FAVORITED_AT = "FAVORITED_AT"
    ARCHIVED_AT = "ARCHIVED_AT"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @property
    def opposite(self) -> SortOrder:
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


class ContentType(str, Enum):
    VIDEO = "VIDEO"
    ARTICLE = "ARTICLE"


def status_from_storage(value: int) -> SavedItemStatus:
    """Map the stored status integer to its enum member.

    Raises:
        ValueError: For integers outside the known set.
    """
    match value:
        case 0:
            return SavedItemStatus.UNREAD
        case 1:
            return SavedItemStatus.ARCHIVED
        case 2:
            return SavedItemStatus.DELETED
        case 3:
            return SavedItemStatus.HIDDEN
        case _:
            raise ValueError(f"Unknown saved item status: {value!r}")


def status_to_storage(status: SavedItemStatus) -> int:
    """Map a status enum member to the stored integer."""
    match status:
        case SavedItemStatus.UNREAD:
            return 0
        case SavedItemStatus.ARCHIVED:
            return 1
        case SavedItemStatus.DELETED:
            return 2
        case SavedItemStatus.HIDDEN:
            return 3


def sort_column(sort_by: SortBy) -> str:
    """Name of the timestamp column backing a sort option."""
    match sort_by:
        case SortBy.CREATED_AT:
            return "time_added"
        case SortBy.UPDATED_AT:
            return "time_updated"
        case SortBy.FAVORITED_AT:
            return "time_favorited"
        case SortBy.ARCHIVED_AT:
            return "time_read"


class SavedItemsSort(BaseModel):
    """Ordering of a saved items connection."""

    sort_by: SortBy = Field(default=SortBy.CREATED_AT)
    sort_order: SortOrder = Field(default=SortOrder.DESC)

    model_config = ConfigDict(frozen=True)

    @property
    def column(self) -> str:
        return sort_column(self.sort_by)


class SavedItemsFilter(BaseModel):
    """Conjunctive filter over a user's saves.

    ``updated_since`` is epoch seconds and exclusive. ``tag_names`` may
    contain ``_untagged_`` to match saves without any tag.
    """

    updated_since: int | None = None
    is_favorite: bool | None = None
    is_archived: bool | None = None
    status: SavedItemStatus | None = None
    states: list[SavedItemStatus] | None = None
    is_highlighted: bool | None = None
    content_type: ContentType | None = None
    tag_names: list[str] | None = None

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True, slots=True)
class ListRow:
    """A saved item as read from ``list`` or the staging table.

    Time fields are epoch seconds, 0 when unset.
    """

    item_id: int
    resolved_id: int
    given_url: str
    given_title: str
    favorite: int
    status: int
    time_added: int
    time_updated: int
    time_read: int
    time_favorited: int

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ListRow:
        return cls(
            item_id=int(row["item_id"]),
            resolved_id=int(row["resolved_id"] or 0),
            given_url=row["given_url"],
            given_title=row["given_title"] or "",
            favorite=int(row["favorite"] or 0),
            status=int(row["status"]),
            time_added=int(row["time_added"] or 0),
            time_updated=int(row["time_updated"] or 0),
            time_read=int(row["time_read"] or 0),
            time_favorited=int(row["time_favorited"] or 0),
        )

    def sort_value(self, sort: SavedItemsSort) -> int:
        """Raw value of the active sort column, as carried in cursors."""
        return getattr(self, sort.column)


class SavedItem(BaseModel):
    """A save as exposed to clients.

    Timestamps are epoch seconds, or None when the event never happened.
    """

    id: str
    resolved_id: str
    url: str
    title: str = ""
    is_favorite: bool
    favorited_at: int | None = None
    status: SavedItemStatus
    is_archived: bool
    archived_at: int | None = None
    created_at: int | None = None
    updated_at: int | None = None
    deleted_at: int | None = None

    model_config = ConfigDict(frozen=True)


SavedItemConnection = Connection[SavedItem]


def _timestamp(value: int) -> int | None:
    return value if value > 0 else None


def row_to_entity(row: ListRow) -> SavedItem:
    """Convert one raw row to a SavedItem."""
    status = status_from_storage(row.status)
    return SavedItem(
        id=str(row.item_id),
        resolved_id=str(row.resolved_id),
        url=row.given_url,
        title=row.given_title,
        is_favorite=bool(row.favorite),
        favorited_at=_timestamp(row.time_favorited),
        status=status,
        is_archived=status is SavedItemStatus.ARCHIVED,
        archived_at=_timestamp(row.time_read),
        created_at=_timestamp(row.time_added),
        updated_at=_timestamp(row.time_updated),
        deleted_at=_timestamp(row.time_updated) if status is SavedItemStatus.DELETED else None,
    )


def rows_to_entities(rows: Iterable[ListRow]) -> list[SavedItem]:
    """Convert raw rows to SavedItems, preserving order."""
    return [row_to_entity(row) for row in rows]


__all__ = [
    "ContentType",
    "ListRow",
    "SavedItem",
    "SavedItemConnection",
    "SavedItemStatus",
    "SavedItemsFilter",
    "SavedItemsSort",
    "SortBy",
    "SortOrder",
    "row_to_entity",
    "rows_to_entities",
    "sort_column",
    "status_from_storage",
    "status_to_storage",
]
