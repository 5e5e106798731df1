"""Database engine and session management.

The engine is created once per process from ``DatabaseSettings``. Sessions
come from ``AsyncSessionLocal``; the pagination engine needs every
statement of one fetch on one connection, which a single ``AsyncSession``
provides for the duration of its transaction.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from list_api.core.settings import get_app_settings, get_db_settings
from list_api.infra.metrics.prometheus import (
    database_connections_active,
    database_query_duration_seconds,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()
app_settings = get_app_settings()

DATABASE_URL = db_settings.url

engine = create_async_engine(
    DATABASE_URL,
    **{**db_settings.sqlalchemy_engine_kwargs(), "echo": db_settings.echo or app_settings.debug},
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

_OPERATIONS = ("SELECT", "INSERT", "DELETE", "CREATE", "DROP", "BEGIN", "COMMIT", "ROLLBACK")


def enable_sqlite_transactional_ddl(async_engine: AsyncEngine) -> None:
    """Let SQLAlchemy, not pysqlite, decide where SQLite transactions begin.

    pysqlite only emits BEGIN ahead of DML, so a CREATE TEMPORARY TABLE
    issued first in a transaction autocommits and survives the rollback.
    SAVEPOINT needs the same treatment. Must run before the first connect.
    """
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _disable_driver_begin(dbapi_conn: Any, connection_record: Any) -> None:
        _ = connection_record
        dbapi_conn.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


if engine.dialect.name == "sqlite":
    enable_sqlite_transactional_ddl(engine)


@event.listens_for(engine.sync_engine.pool, "connect")
def _receive_connect(dbapi_conn: Any, connection_record: Any) -> None:
    """Increment active connections when a new connection is established."""
    _ = dbapi_conn, connection_record
    database_connections_active.inc()


@event.listens_for(engine.sync_engine.pool, "close")
def _receive_close(dbapi_conn: Any, connection_record: Any) -> None:
    """Decrement active connections when a connection is closed."""
    _ = dbapi_conn, connection_record
    database_connections_active.dec()


@event.listens_for(engine.sync_engine, "before_cursor_execute")
def _before_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    """Record query start time before execution."""
    _ = conn, cursor, statement, parameters, executemany
    context._query_start_time = time.perf_counter()


@event.listens_for(engine.sync_engine, "after_cursor_execute")
def _after_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    """Record query duration and link it to the current trace via exemplar."""
    _ = conn, cursor, parameters, executemany
    duration = time.perf_counter() - context._query_start_time
    database_query_duration_seconds.labels(operation=classify_statement(statement)).observe(
        duration, exemplar=_trace_exemplar()
    )


def classify_statement(statement: str | None) -> str:
    """Return the leading SQL keyword of a statement, or UNKNOWN.

    Example:
        >>> classify_statement("CREATE TEMPORARY TABLE temp_getlist_clientapi (...)")
        'CREATE'
    """
    if not statement:
        return "UNKNOWN"
    head = statement.lstrip().split(None, 1)[0].upper() if statement.strip() else ""
    return head if head in _OPERATIONS else "UNKNOWN"


def _trace_exemplar() -> dict[str, str] | None:
    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        return {"trace_id": format(span.get_span_context().trace_id, "032x")}
    return None


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Example:
        async with get_async_session() as session:
            page = await ListPaginationService(session, user_id).get_page()
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_database() -> None:
    """Check connectivity at startup.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached.
    """
    logger.info("Initializing database connection", extra={"driver": engine.dialect.driver})
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Failed to connect to database")
        raise
    logger.info("Database connection established successfully")


async def close_database() -> None:
    """Dispose the engine's pool. Called during application shutdown."""
    logger.info("Closing database connection")
    await engine.dispose()


__all__ = [
    "AsyncSessionLocal",
    "classify_statement",
    "close_database",
    "enable_sqlite_transactional_ddl",
    "engine",
    "get_async_session",
    "init_database",
]
