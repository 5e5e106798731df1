"""Read access to a user's tags.

A tag is aggregated from ``item_tags`` per name: the ids of the saves it is
applied to, the earliest association time and the latest update time.
Association rows are read separately from the aggregate so no
dialect-specific string aggregation is needed.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from list_api.core.database import unix_timestamp
from list_api.core.pagination import Edge, PageInfo, PaginationInput, validate_pagination
from list_api.core.settings import get_pagination_settings
from list_api.features.saves.models import ItemTag
from list_api.features.tags.schemas import (
    Tag,
    TagConnection,
    clean_and_validate_tag,
    decode_tag_id,
    encode_tag_id,
)
from list_api.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from list_api.core.settings import PaginationSettings

# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


def _timestamp(value: int | None) -> int | None:
    if value is None:
        return None
    value = int(value)
    return value if value > 0 else None


class TagDataService:
    """Service for reading the tags of one user.

    Args:
        session: Database session for queries.
        user_id: Owner of the tags.
        settings: Pagination limits, defaulting to the environment.
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

    def _grouped(self) -> Select:
        item_tags = ItemTag.__table__
        return (
            select(
                item_tags.c.tag.label("name"),
                unix_timestamp(func.min(item_tags.c.time_added)).label("created_at"),
                # time_updated is sparse; fall back to when the tag was added
                unix_timestamp(
                    func.max(func.coalesce(item_tags.c.time_updated, item_tags.c.time_added))
                ).label("updated_at"),
            )
            .where(item_tags.c.user_id == self._user_id)
            .group_by(item_tags.c.tag)
        )

    async def _saved_item_ids(self, names: Sequence[str]) -> dict[str, list[str]]:
        item_tags = ItemTag.__table__
        result = await self._session.execute(
            select(item_tags.c.tag, item_tags.c.item_id)
            .where(item_tags.c.user_id == self._user_id, item_tags.c.tag.in_(list(names)))
            .order_by(item_tags.c.tag, item_tags.c.item_id)
        )
        ids: dict[str, list[str]] = defaultdict(list)
        for tag, item_id in result.all():
            ids[tag].append(str(item_id))
        return ids

    async def _load(self, query: Select) -> list[Tag]:
        result = await self._session.execute(query)
        rows = result.all()
        if not rows:
            return []
        ids = await self._saved_item_ids([row.name for row in rows])
        return [
            Tag(
                id=encode_tag_id(row.name),
                name=row.name,
                saved_item_ids=ids.get(row.name, []),
                created_at=_timestamp(row.created_at),
                updated_at=_timestamp(row.updated_at),
            )
            for row in rows
        ]

    async def get_tags_by_user(self, pagination: PaginationInput | None = None) -> TagConnection:
        """Page through the user's tags in ascending name order.

        Cursors are tag ids. Page flags follow the same rules as saved item
        connections.

        Raises:
            UserInputError: For invalid pagination arguments or cursors.
        """
        pagination = validate_pagination(
            pagination,
            default_page_size=self._settings.default_page_size,
            max_page_size=self._settings.max_page_size,
        )
        size = pagination.page_size
        name = ItemTag.__table__.c.tag

        query = self._grouped()
        if pagination.is_backward:
            if pagination.before is not None:
                query = query.where(name < decode_tag_id(pagination.before))
            query = query.order_by(name.desc())
        else:
            if pagination.after is not None:
                query = query.where(name > decode_tag_id(pagination.after))
            query = query.order_by(name.asc())

        tags = await self._load(query.limit(size + 1))

        if pagination.is_backward:
            has_previous_page = len(tags) > size
            has_next_page = pagination.before is not None
            page = list(reversed(tags[:size]))
        else:
            has_next_page = len(tags) > size
            has_previous_page = pagination.after is not None
            page = tags[:size]

        total = await self._session.execute(
            select(func.count(func.distinct(ItemTag.__table__.c.tag))).where(
                ItemTag.__table__.c.user_id == self._user_id
            )
        )
        edges = [Edge[Tag](node=tag, cursor=tag.id) for tag in page]
        lazy_logger.debug(lambda: f"get_tags_by_user(user={self._user_id}) -> {len(edges)} tags")

        return TagConnection(
            edges=edges,
            page_info=PageInfo(
                has_previous_page=has_previous_page,
                has_next_page=has_next_page,
                start_cursor=edges[0].cursor if edges else None,
                end_cursor=edges[-1].cursor if edges else None,
            ),
            total_count=total.scalar_one(),
        )

    async def get_tag_by_name(self, name: str) -> Tag | None:
        """The user's tag with this name, or None.

        Raises:
            UserInputError: If the name is blank.
        """
        tags = await self.get_tags_by_names([name])
        return tags[0] if tags else None

    async def get_tag_by_id(self, tag_id: str) -> Tag | None:
        """The user's tag behind an opaque tag id, or None."""
        return await self.get_tag_by_name(decode_tag_id(tag_id))

    async def get_tags_by_names(self, names: Sequence[str]) -> list[Tag]:
        """The user's tags among ``names``, ordered by name."""
        cleaned = list(dict.fromkeys(clean_and_validate_tag(name) for name in names))
        if not cleaned:
            return []
        query = (
            self._grouped()
            .where(ItemTag.__table__.c.tag.in_(cleaned))
            .order_by(ItemTag.__table__.c.tag)
        )
        return await self._load(query)

    async def get_tags_for_saved_items(self, item_ids: Sequence[str]) -> list[list[Tag]]:
        """Tags of each save, aligned with ``item_ids``.

        Used as a DataLoader batch function: one round of queries for any
        number of saves.
        """
        ids = [int(item_id) for item_id in item_ids]
        if not ids:
            return []

        item_tags = ItemTag.__table__
        result = await self._session.execute(
            select(item_tags.c.item_id, item_tags.c.tag).where(
                item_tags.c.user_id == self._user_id, item_tags.c.item_id.in_(ids)
            )
        )
        names_by_item: dict[int, list[str]] = defaultdict(list)
        for item_id, tag in result.all():
            names_by_item[item_id].append(tag)

        all_names = sorted({name for names in names_by_item.values() for name in names})
        if not all_names:
            return [[] for _ in ids]

        tags = await self._load(
            self._grouped().where(item_tags.c.tag.in_(all_names)).order_by(item_tags.c.tag)
        )
        by_name = {tag.name: tag for tag in tags}
        return [
            [by_name[name] for name in sorted(names_by_item.get(item_id, [])) if name in by_name]
            for item_id in ids
        ]


__all__ = ["TagDataService"]
