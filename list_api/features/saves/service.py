"""Cursor pagination over a user's saved items.

One call to ``ListPaginationService.get_page`` runs in a single
transaction on a single connection:

1. validate the pagination arguments
2. build the base query over ``list`` and apply filters
3. count the filtered set (bounded)
4. stage and read the page window
5. drop every temporary table the fetch created

Temporary tables are dropped on the error path as well, before the
original error propagates.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from opentelemetry import trace
from sqlalchemy import func, select

from list_api.core.pagination import PaginationInput, validate_pagination
from list_api.core.settings import get_pagination_settings
from list_api.features.saves.assembler import assemble_connection
from list_api.features.saves.filters import FilterCompiler
from list_api.features.saves.models import ListItem, list_projection
from list_api.features.saves.schemas import SavedItemsSort
from list_api.features.saves.temp_tables import TempTableRegistry
from list_api.features.saves.window import PageWindowResolver
from list_api.infra.logging import get_lazy_logger, set_log_context
from list_api.infra.metrics.prometheus import list_pagination_duration_seconds

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

    from list_api.core.settings import PaginationSettings
    from list_api.features.saves.schemas import SavedItemConnection, SavedItemsFilter

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)
tracer = trace.get_tracer(__name__)


class ListPaginationService:
    """Serves pages of one user's saved items.

    Args:
        session: Session the fetch runs on. A nested transaction is used
            when the session is already inside one.
        user_id: Owner of the saves.
        settings: Pagination limits, defaulting to the environment.

    Example:
        service = ListPaginationService(session, user_id=42)
        page = await service.get_page(
            filter=SavedItemsFilter(is_favorite=True),
            sort=SavedItemsSort(sort_by=SortBy.UPDATED_AT),
            pagination=PaginationInput(first=10),
        )
        next_page = await service.get_page(
            pagination=PaginationInput(first=10, after=page.page_info.end_cursor),
        )
    """

    def __init__(
        self,
        session: AsyncSession,
        user_id: int,
        settings: PaginationSettings | None = None,
    ) -> None:
        self._session = session
        self._user_id = user_id
        self._settings = settings or get_pagination_settings()

    async def get_page(
        self,
        filter: SavedItemsFilter | None = None,
        sort: SavedItemsSort | None = None,
        pagination: PaginationInput | None = None,
        scoping_ids: Sequence[int] | None = None,
    ) -> SavedItemConnection:
        """Fetch one page of saves.

        Args:
            filter: Conjunctive filter rules.
            sort: Ordering, CREATED_AT DESC by default.
            pagination: Raw connection arguments.
            scoping_ids: When given, only these item ids are considered. An
                empty sequence yields an empty connection.

        Returns:
            The page with cursors, page info and bounded total count.

        Raises:
            UserInputError: For invalid pagination arguments, cursors that do
                not resolve, or rejected filter values.
        """
        sort = sort or SavedItemsSort()
        pagination = validate_pagination(
            pagination,
            default_page_size=self._settings.default_page_size,
            max_page_size=self._settings.max_page_size,
        )
        direction = "backward" if pagination.is_backward else "forward"
        has_cursor = "true" if pagination.cursor is not None else "false"

        set_log_context(user_id=self._user_id)
        start_time = time.perf_counter()

        with tracer.start_as_current_span("list_pagination.get_page") as span:
            span.set_attribute("list.user_id", self._user_id)
            span.set_attribute("list.sort_by", sort.sort_by.value)
            span.set_attribute("list.sort_order", sort.sort_order.value)
            span.set_attribute("list.direction", direction)
            span.set_attribute("list.page_size", pagination.page_size)
            span.set_attribute("list.has_cursor", pagination.cursor is not None)

            transaction = (
                self._session.begin_nested()
                if self._session.in_transaction()
                else self._session.begin()
            )
            async with transaction:
                connection = await self._session.connection()
                connection_page = await self._fetch(
                    connection, filter, sort, pagination, scoping_ids
                )

            span.set_attribute("list.total_count", connection_page.total_count)
            span.set_attribute("list.returned", len(connection_page.edges))

        duration = time.perf_counter() - start_time
        list_pagination_duration_seconds.labels(direction=direction, cursor=has_cursor).observe(
            duration
        )
        lazy_logger.debug(
            lambda: f"get_page(user={self._user_id}, sort={sort.sort_by.value} "
            f"{sort.sort_order.value}, {direction}) -> {len(connection_page.edges)} of "
            f"{connection_page.total_count} in {duration:.3f}s",
        )
        return connection_page

    async def _fetch(
        self,
        connection: AsyncConnection,
        filter: SavedItemsFilter | None,
        sort: SavedItemsSort,
        pagination: PaginationInput,
        scoping_ids: Sequence[int] | None,
    ) -> SavedItemConnection:
        registry = TempTableRegistry(connection)
        try:
            query = await FilterCompiler(registry, self._user_id).apply(
                self._base_query(scoping_ids), filter
            )
            total_count = await self._count(connection, query)
            rows = await PageWindowResolver(
                registry,
                sort,
                pagination,
                collision_scan_limit=self._settings.collision_scan_limit,
            ).resolve(query)
        except BaseException:
            await registry.discard()
            raise
        await registry.drop_all()

        return assemble_connection(rows, sort, pagination, total_count)

    def _base_query(self, scoping_ids: Sequence[int] | None) -> Select:
        table = ListItem.__table__
        query = (
            select(*list_projection())
            .select_from(table)
            .where(table.c.user_id == self._user_id)
        )
        if scoping_ids is not None:
            query = query.where(table.c.item_id.in_([int(item_id) for item_id in scoping_ids]))
        return query

    async def _count(self, connection: AsyncConnection, query: Select) -> int:
        bounded = query.limit(self._settings.total_count_limit).subquery()
        result = await connection.execute(select(func.count()).select_from(bounded))
        return result.scalar_one()


__all__ = ["ListPaginationService"]
