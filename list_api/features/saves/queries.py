"""Direct lookups of a user's saves by id or URL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from list_api.features.saves.models import ListItem, list_projection
from list_api.features.saves.schemas import ListRow, SavedItem, row_to_entity, rows_to_entities
from list_api.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

lazy_logger = get_lazy_logger(__name__)


class SavedItemQueryService:
    """Reads saves of one user without pagination.

    Rows go through the same projection and entity conversion as the
    paginated list, so timestamps and statuses match between the two.
    """

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        self._session = session
        self._user_id = user_id

    def _query(self) -> Select:
        table = ListItem.__table__
        return select(*list_projection()).where(table.c.user_id == self._user_id)

    async def _fetch(self, query: Select) -> list[ListRow]:
        result = await self._session.execute(query)
        return [ListRow.from_mapping(row) for row in result.mappings()]

    async def get_by_id(self, item_id: int | str) -> SavedItem | None:
        """Save with the given item id, or None."""
        try:
            item_id = int(item_id)
        except ValueError:
            return None
        rows = await self._fetch(self._query().where(ListItem.__table__.c.item_id == item_id))
        return row_to_entity(rows[0]) if rows else None

    async def get_by_url(self, given_url: str) -> SavedItem | None:
        """Save whose URL is exactly ``given_url``, or None."""
        rows = await self._fetch(
            self._query().where(ListItem.__table__.c.given_url == given_url).limit(1)
        )
        return row_to_entity(rows[0]) if rows else None

    async def get_by_ids(self, item_ids: Sequence[int | str]) -> list[SavedItem]:
        """Saves for the given ids; unknown ids are skipped."""
        ids = [int(item_id) for item_id in item_ids if str(item_id).isdigit()]
        if not ids:
            return []
        rows = await self._fetch(self._query().where(ListItem.__table__.c.item_id.in_(ids)))
        lazy_logger.debug(lambda: f"get_by_ids({len(ids)} ids) -> {len(rows)} saves")
        return rows_to_entities(rows)

    async def get_by_urls(self, urls: Sequence[str]) -> list[SavedItem]:
        """Saves for the given URLs; unknown URLs are skipped."""
        if not urls:
            return []
        rows = await self._fetch(
            self._query().where(ListItem.__table__.c.given_url.in_(list(urls)))
        )
        return rows_to_entities(rows)


__all__ = ["SavedItemQueryService"]
