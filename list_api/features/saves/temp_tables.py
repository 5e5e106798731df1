"""Session-scoped staging tables used by the list pagination engine.

Every paginated fetch stages its candidate rows in ``temp_getlist_clientapi``
with a monotonically increasing ``seq``. Filters that would otherwise need
correlated subqueries stage matching item ids in single-column helper
tables. All of them are created with the TEMPORARY prefix, so they are
visible only to the connection that created them, and are dropped before
the fetch's transaction ends.

``TempTableRegistry`` is created once per fetch and records every table
created on its connection so cleanup can drop exactly those.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from list_api.core.database import DropTemporaryTable
from list_api.features.saves.models import LIST_COLUMNS
from list_api.infra.metrics.prometheus import list_pagination_temp_tables_total

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection

logger = logging.getLogger(__name__)

# Kept apart from Base.metadata so create_all never sees these tables
temp_metadata = MetaData()

list_stage = Table(
    "temp_getlist_clientapi",
    temp_metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("item_id", BigInteger, nullable=False),
    Column("resolved_id", BigInteger, nullable=False),
    # MEMORY tables cannot hold TEXT; 5000 keeps long URLs intact
    Column("given_url", String(5000), nullable=False),
    Column("given_title", String(75), nullable=False),
    Column("favorite", SmallInteger, nullable=False),
    Column("status", SmallInteger, nullable=False),
    Column("time_added", BigInteger),
    Column("time_updated", BigInteger),
    Column("time_read", BigInteger),
    Column("time_favorited", BigInteger),
    prefixes=["TEMPORARY"],
    mysql_engine="MEMORY",
)

highlights_stage = Table(
    "temp_getlist_clientapi_hl",
    temp_metadata,
    Column("item_id", BigInteger, primary_key=True, autoincrement=False),
    prefixes=["TEMPORARY"],
    mysql_engine="MEMORY",
)

tags_stage = Table(
    "temp_getlist_clientapi_tags",
    temp_metadata,
    Column("item_id", BigInteger, primary_key=True, autoincrement=False),
    prefixes=["TEMPORARY"],
    mysql_engine="MEMORY",
)

# Insert column order for list_stage, shared with the select projection
STAGE_COLUMNS = LIST_COLUMNS


class TempTableRegistry:
    """Tracks the temporary tables created during one paginated fetch.

    Usage:
        registry = TempTableRegistry(connection)
        try:
            await registry.create(list_stage)
            ...
        except BaseException:
            await registry.discard()
            raise
        await registry.drop_all()
    """

    def __init__(self, connection: AsyncConnection) -> None:
        self.connection = connection
        self._created: list[Table] = []

    @property
    def tables(self) -> tuple[Table, ...]:
        """Tables created so far, in creation order."""
        return tuple(self._created)

    async def create(self, table: Table) -> Table:
        """Create ``table`` on the fetch's connection and record it."""
        await self.connection.execute(CreateTable(table))
        self._created.append(table)
        list_pagination_temp_tables_total.labels(table=table.name).inc()
        logger.debug("Created temporary table %s", table.name)
        return table

    async def drop_all(self) -> None:
        """Drop every recorded table, newest first."""
        while self._created:
            table = self._created.pop()
            await self.connection.execute(DropTemporaryTable(table))
            logger.debug("Dropped temporary table %s", table.name)

    async def discard(self) -> None:
        """Drop recorded tables while another error is propagating.

        A failing drop is logged and the remaining tables are still
        attempted; the caller re-raises the original error. MySQL keeps
        temporary tables through a rollback, so the drops are explicit.
        """
        while self._created:
            table = self._created.pop()
            try:
                await self.connection.execute(DropTemporaryTable(table))
            except SQLAlchemyError:
                logger.warning(
                    "Failed to drop temporary table %s during error cleanup",
                    table.name,
                    exc_info=True,
                )


__all__ = [
    "STAGE_COLUMNS",
    "TempTableRegistry",
    "highlights_stage",
    "list_stage",
    "tags_stage",
    "temp_metadata",
]
