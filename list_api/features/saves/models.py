"""SQLAlchemy models for the legacy saved items schema.

``list`` holds one row per (user, item) save. ``item_tags`` associates
free-form tag names to saves. ``user_annotations`` holds highlights.
``items_extended`` lives in the ``readitla_b`` schema and carries parsed
metadata keyed by the resolved item id.

Timestamps are naive DATETIME values. A zero date (or NULL) means the
event never happened; callers normalize it at the boundary.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from list_api.core.database import EXTENDED_SCHEMA, Base, epoch_seconds


class ListItem(Base):
    """A saved item in a user's list."""

    __tablename__ = "list"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    item_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    resolved_id: Mapped[int] = mapped_column(BigInteger, default=0)
    given_url: Mapped[str] = mapped_column(Text)
    title: Mapped[str] = mapped_column(String(75), default="")
    time_added: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    time_updated: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    time_read: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    time_favorited: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    favorite: Mapped[int] = mapped_column(SmallInteger, default=0)
    status: Mapped[int] = mapped_column(SmallInteger, default=0)
    api_id: Mapped[int] = mapped_column(Integer, default=0)
    api_id_updated: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<ListItem(user_id={self.user_id}, item_id={self.item_id}, status={self.status})>"


class ItemTag(Base):
    """Association of a tag name to a saved item."""

    __tablename__ = "item_tags"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    item_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    tag: Mapped[str] = mapped_column(String(25), primary_key=True)
    time_added: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    time_updated: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    api_id: Mapped[int] = mapped_column(Integer, default=0)
    api_id_updated: Mapped[int] = mapped_column(Integer, default=0)


class UserAnnotation(Base):
    """A highlight on a saved item. ``status`` 1 means active."""

    __tablename__ = "user_annotations"

    annotation_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    item_id: Mapped[int] = mapped_column(BigInteger)
    quote: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[int] = mapped_column(SmallInteger, default=1)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class ItemExtended(Base):
    """Parsed per-item metadata, keyed by resolved item id."""

    __tablename__ = "items_extended"
    __table_args__ = {"schema": EXTENDED_SCHEMA}

    extended_item_id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    video: Mapped[int] = mapped_column(SmallInteger, default=0)
    is_article: Mapped[int] = mapped_column(SmallInteger, default=0)


ACTIVE_ANNOTATION = 1

# Columns read for a saved item, in staging table order. Time columns are
# read as epoch seconds so they compare and sort as integers.
LIST_TIME_COLUMNS = ("time_added", "time_updated", "time_read", "time_favorited")
LIST_COLUMNS = (
    "item_id",
    "resolved_id",
    "given_url",
    "given_title",
    "favorite",
    "status",
    *LIST_TIME_COLUMNS,
)


def list_projection() -> list[ColumnElement]:
    """Labeled select list over ``list`` matching LIST_COLUMNS."""
    table = ListItem.__table__
    columns: list[ColumnElement] = [
        table.c.item_id,
        table.c.resolved_id,
        table.c.given_url,
        table.c.title.label("given_title"),
        table.c.favorite,
        table.c.status,
    ]
    columns.extend(epoch_seconds(table.c[name]).label(name) for name in LIST_TIME_COLUMNS)
    return columns


__all__ = [
    "ACTIVE_ANNOTATION",
    "LIST_COLUMNS",
    "LIST_TIME_COLUMNS",
    "ItemExtended",
    "ItemTag",
    "ListItem",
    "UserAnnotation",
    "list_projection",
]
