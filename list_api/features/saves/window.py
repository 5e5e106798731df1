"""Staging of the rows that make up one page of saved items.

The filtered query is materialized into ``temp_getlist_clientapi`` in the
effective direction of travel, so ``seq`` numbers rows in the order they
are read out. Backward pages (``last``/``before``) travel against the
requested sort order and are reversed after reading.

Resuming from a cursor happens in two steps. All rows sharing the cursor's
sort value are staged first and everything up to and including the cursor
row is deleted by ``seq``; rows strictly beyond the sort value then fill
up the remaining window. Ties on the sort value are therefore broken by
item id in the direction of travel, and no row is served twice or skipped
between pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select

from list_api.core.database import epoch_seconds
from list_api.core.exceptions import UserInputError
from list_api.core.pagination import CursorCodec, InvalidCursorError
from list_api.features.saves.models import ListItem
from list_api.features.saves.schemas import ListRow, SortOrder
from list_api.features.saves.temp_tables import STAGE_COLUMNS, list_stage
from list_api.infra.logging import get_lazy_logger
from list_api.infra.metrics.prometheus import (
    list_pagination_collision_rows,
    list_pagination_cursor_not_found_total,
)

if TYPE_CHECKING:
    from sqlalchemy import Select

    from list_api.core.pagination import PaginationInput
    from list_api.features.saves.schemas import SavedItemsSort
    from list_api.features.saves.temp_tables import TempTableRegistry

logger = get_lazy_logger(__name__)

CURSOR_NOT_FOUND = "Cursor not found."


class PageWindowResolver:
    """Stages and reads the window of rows for one page request.

    The window holds up to ``page_size + 1`` rows; the extra row tells the
    assembler whether another page exists in the direction of travel.

    Args:
        registry: Temp table registry of the fetch.
        sort: Requested ordering.
        pagination: Validated pagination arguments.
        collision_scan_limit: Maximum rows staged for one sort value.
    """

    def __init__(
        self,
        registry: TempTableRegistry,
        sort: SavedItemsSort,
        pagination: PaginationInput,
        collision_scan_limit: int,
    ) -> None:
        self.registry = registry
        self.sort = sort
        self.pagination = pagination
        self.collision_scan_limit = collision_scan_limit

    @property
    def order(self) -> SortOrder:
        """Direction rows are staged in."""
        if self.pagination.is_backward:
            return self.sort.sort_order.opposite
        return self.sort.sort_order

    @property
    def window_size(self) -> int:
        return self.pagination.page_size + 1

    async def resolve(self, query: Select) -> list[ListRow]:
        """Stage the page for ``query`` and return it in requested order.

        Raises:
            UserInputError: If the cursor is malformed or its row is not
                part of the filtered set.
        """
        await self.registry.create(list_stage)

        cursor = self.pagination.cursor
        if cursor is None:
            await self._stage(self._ordered(query).limit(self.window_size))
        else:
            await self._stage_from_cursor(query, cursor)

        rows = await self._read_window()
        if self.pagination.is_backward:
            rows.reverse()
        return rows

    def _ordered(self, query: Select) -> Select:
        sort_key = query.selected_columns[self.sort.column]
        tiebreak = query.selected_columns["item_id"]
        if self.order is SortOrder.DESC:
            return query.order_by(sort_key.desc(), tiebreak.desc())
        return query.order_by(sort_key.asc(), tiebreak.asc())

    def _sort_expression(self):
        return epoch_seconds(ListItem.__table__.c[self.sort.column])

    async def _stage(self, query: Select) -> None:
        await self.registry.connection.execute(
            insert(list_stage).from_select(list(STAGE_COLUMNS), query)
        )

    async def _staged_count(self) -> int:
        result = await self.registry.connection.execute(
            select(func.count()).select_from(list_stage)
        )
        return result.scalar_one()

    async def _stage_from_cursor(self, query: Select, cursor: str) -> None:
        try:
            cursor_item_id, anchor = CursorCodec.decode(cursor)
            item_id = int(cursor_item_id)
        except (InvalidCursorError, ValueError) as e:
            list_pagination_cursor_not_found_total.inc()
            raise UserInputError(CURSOR_NOT_FOUND, extra={"cursor": cursor}) from e

        # Cursors minted for unset timestamps carry the 0 sort key
        anchor = anchor or 0
        sort_expression = self._sort_expression()

        await self._stage(
            self._ordered(query.where(sort_expression == anchor)).limit(
                self.collision_scan_limit
            )
        )
        collisions = await self._staged_count()
        list_pagination_collision_rows.observe(collisions)

        result = await self.registry.connection.execute(
            select(list_stage.c.seq).where(list_stage.c.item_id == item_id)
        )
        anchor_seq = result.scalar_one_or_none()
        if anchor_seq is None:
            list_pagination_cursor_not_found_total.inc()
            logger.info(
                "Cursor row %s not among %s rows at sort value %s",
                item_id,
                collisions,
                anchor,
            )
            raise UserInputError(CURSOR_NOT_FOUND, extra={"cursor": cursor})

        await self.registry.connection.execute(
            delete(list_stage).where(list_stage.c.seq <= anchor_seq)
        )

        remaining = await self._staged_count()
        shortfall = self.window_size - remaining
        if shortfall <= 0:
            return

        if self.order is SortOrder.DESC:
            beyond = query.where(sort_expression < anchor)
        else:
            beyond = query.where(sort_expression > anchor)
        await self._stage(self._ordered(beyond).limit(shortfall))
        logger.debug(
            lambda: f"Resumed after {item_id} at {anchor}: {remaining} ties, {shortfall} beyond"
        )

    async def _read_window(self) -> list[ListRow]:
        columns = [list_stage.c[name] for name in STAGE_COLUMNS]
        result = await self.registry.connection.execute(
            select(*columns).order_by(list_stage.c.seq).limit(self.window_size)
        )
        return [ListRow.from_mapping(row) for row in result.mappings()]


__all__ = ["CURSOR_NOT_FOUND", "PageWindowResolver"]
