"""Database engine, session factory and lifecycle helpers."""

from .session import (
    AsyncSessionLocal,
    close_database,
    enable_sqlite_transactional_ddl,
    engine,
    get_async_session,
    init_database,
)

__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "enable_sqlite_transactional_ddl",
    "engine",
    "get_async_session",
    "init_database",
]
