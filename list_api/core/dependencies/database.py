"""Database dependencies for FastAPI route handlers.

Two getters are provided:

1. `get_db_session()` - a request-scoped session, closed when the request
   completes. DataLoaders and single-row lookups share it.
2. `get_session_factory()` - the session factory itself. The pagination
   engine opens one session per fetch from it, so concurrent fetches in
   one request never share a connection or its temporary tables.

Tests override both through ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from list_api.infra.database import AsyncSessionLocal, get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_async_session() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency for the session factory."""
    return AsyncSessionLocal
