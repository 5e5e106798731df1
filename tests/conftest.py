"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine and session factory
    - Data Fixtures: factories and a seeder for the legacy list schema

The engine uses a StaticPool so every session shares the one in-memory
connection, which is also where the pagination engine's temporary tables
live. ``readitla_b`` is translated away because SQLite has no schemas.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from list_api.core.database import EXTENDED_SCHEMA, Base  # noqa: E402
from list_api.features.saves.models import (  # noqa: E402
    ItemExtended,
    ItemTag,
    ListItem,
    UserAnnotation,
)
from list_api.infra.database import enable_sqlite_transactional_ddl  # noqa: E402

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

USER_ID = 1
OTHER_USER_ID = 2

# 2020-09-13T12:26:40Z
T = 1_600_000_000


def at(epoch: int | None) -> datetime | None:
    """Naive UTC datetime for an epoch second, as stored in DATETIME columns."""
    if epoch is None:
        return None
    return datetime.fromtimestamp(epoch, UTC).replace(tzinfo=None)


def make_save(
    item_id: int,
    added: int | None = T,
    *,
    user_id: int = USER_ID,
    updated: int | None = None,
    read: int | None = None,
    favorited: int | None = None,
    favorite: int = 0,
    status: int = 0,
    resolved_id: int | None = None,
    url: str | None = None,
    title: str | None = None,
) -> ListItem:
    """Build a ``list`` row. ``updated`` defaults to ``added``."""
    return ListItem(
        user_id=user_id,
        item_id=item_id,
        resolved_id=item_id if resolved_id is None else resolved_id,
        given_url=url or f"https://example.com/articles/{item_id}",
        title=title if title is not None else f"Article {item_id}",
        time_added=at(added),
        time_updated=at(added if updated is None else updated),
        time_read=at(read),
        time_favorited=at(favorited),
        favorite=favorite,
        status=status,
    )


def make_tag(
    item_id: int,
    name: str,
    *,
    user_id: int = USER_ID,
    added: int | None = T,
    updated: int | None = None,
) -> ItemTag:
    return ItemTag(
        user_id=user_id,
        item_id=item_id,
        tag=name,
        time_added=at(added),
        time_updated=at(updated),
    )


def make_highlight(item_id: int, *, user_id: int = USER_ID, status: int = 1) -> UserAnnotation:
    return UserAnnotation(
        annotation_id=f"{user_id}-{item_id}-{status}",
        user_id=user_id,
        item_id=item_id,
        quote="highlighted text",
        status=status,
        created_at=at(T),
        updated_at=at(T),
    )


def make_extended(resolved_id: int, *, video: int = 0, is_article: int = 0) -> ItemExtended:
    return ItemExtended(extended_item_id=resolved_id, video=video, is_article=is_article)


class Seeder:
    """Inserts rows through a session of their own and commits.

    Example:
        await seed.add(make_save(1), make_tag(1, "python"))
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, *rows: Any) -> None:
        async with self._session_factory() as session:
            session.add_all(rows)
            await session.commit()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on a fresh in-memory SQLite database with the list schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        execution_options={"schema_translate_map": {EXTENDED_SCHEMA: None}},
    )
    enable_sqlite_transactional_ddl(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for the code under test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    return Seeder(session_factory)


@pytest.fixture
def temp_table_names(db_engine: AsyncEngine):
    """Async callable listing temporary tables left on the shared connection."""

    async def _names() -> list[str]:
        async with db_engine.connect() as conn:
            result = await conn.execute(
                text("SELECT name FROM sqlite_temp_master WHERE type = 'table'")
            )
            return [row[0] for row in result]

    return _names
