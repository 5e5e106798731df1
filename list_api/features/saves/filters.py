"""Translation of a SavedItemsFilter into clauses on the base list query.

Rules are applied in a fixed order. Highlight and tag matching stage the
matching item ids in helper temporary tables first and then join them,
keeping aggregates out of the pagination query. The tag rule runs last and
switches the projection to DISTINCT.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import and_, insert, or_, select

from list_api.core.database import epoch_seconds
from list_api.core.exceptions import UserInputError
from list_api.features.saves.models import (
    ACTIVE_ANNOTATION,
    ItemExtended,
    ItemTag,
    ListItem,
    UserAnnotation,
)
from list_api.features.saves.schemas import (
    ContentType,
    SavedItemsFilter,
    SavedItemStatus,
    status_to_storage,
)
from list_api.features.saves.temp_tables import highlights_stage, tags_stage
from list_api.features.tags.schemas import split_tag_filter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Select

    from list_api.features.saves.temp_tables import TempTableRegistry

logger = logging.getLogger(__name__)


class FilterCompiler:
    """Applies filter rules to a select over ``list`` for one user.

    Helper tables are created through the fetch's TempTableRegistry so the
    caller's cleanup drops them with the primary staging table.
    """

    def __init__(self, registry: TempTableRegistry, user_id: int) -> None:
        self.registry = registry
        self.user_id = user_id

    async def apply(self, query: Select, filter: SavedItemsFilter | None) -> Select:
        """Return ``query`` narrowed by every rule set in ``filter``."""
        if filter is None:
            return query

        list_table = ListItem.__table__
        archived = status_to_storage(SavedItemStatus.ARCHIVED)

        if filter.updated_since is not None:
            query = query.where(epoch_seconds(list_table.c.time_updated) > filter.updated_since)

        if filter.is_favorite is not None:
            query = query.where(list_table.c.favorite == int(filter.is_favorite))

        if filter.is_archived is not None:
            if filter.is_archived:
                query = query.where(list_table.c.status == archived)
            else:
                query = query.where(list_table.c.status != archived)

        if filter.status is not None:
            _reject_deleted([filter.status])
            query = query.where(list_table.c.status == status_to_storage(filter.status))

        if filter.states is not None:
            _reject_deleted(filter.states)
            query = query.where(
                list_table.c.status.in_([status_to_storage(state) for state in filter.states])
            )

        if filter.is_highlighted is not None:
            query = await self._apply_highlighted(query, filter.is_highlighted)

        if filter.content_type is not None:
            query = self._apply_content_type(query, filter.content_type)

        # Must stay last: switches the projection to DISTINCT
        if filter.tag_names:
            query = await self._apply_tag_names(query, filter.tag_names)

        return query

    async def _apply_highlighted(self, query: Select, is_highlighted: bool) -> Select:
        list_table = ListItem.__table__
        annotations = UserAnnotation.__table__

        await self.registry.create(highlights_stage)
        await self.registry.connection.execute(
            insert(highlights_stage).from_select(
                ["item_id"],
                select(annotations.c.item_id)
                .where(
                    annotations.c.user_id == self.user_id,
                    annotations.c.status == ACTIVE_ANNOTATION,
                )
                .distinct(),
            )
        )

        onclause = list_table.c.item_id == highlights_stage.c.item_id
        if is_highlighted:
            return query.join(highlights_stage, onclause)
        return query.outerjoin(highlights_stage, onclause).where(
            highlights_stage.c.item_id.is_(None)
        )

    def _apply_content_type(self, query: Select, content_type: ContentType) -> Select:
        list_table = ListItem.__table__
        extended = ItemExtended.__table__

        query = query.join(extended, list_table.c.resolved_id == extended.c.extended_item_id)
        match content_type:
            case ContentType.VIDEO:
                return query.where(extended.c.video == 1)
            case ContentType.ARTICLE:
                return query.where(extended.c.is_article == 1)
            case _:
                raise ValueError(f"Unknown content type: {content_type!r}")

    async def _apply_tag_names(self, query: Select, tag_names: list[str]) -> Select:
        names, untagged = split_tag_filter(tag_names)
        if not names and not untagged:
            return query

        list_table = ListItem.__table__
        item_tags = ItemTag.__table__

        user_tags = (
            select(item_tags.c.tag, item_tags.c.item_id, item_tags.c.user_id)
            .where(item_tags.c.user_id == self.user_id)
            .subquery("t")
        )
        if names and untagged:
            condition = or_(user_tags.c.tag.in_(names), user_tags.c.tag.is_(None))
        elif untagged:
            condition = user_tags.c.tag.is_(None)
        else:
            condition = user_tags.c.tag.in_(names)

        list_tags = (
            query.outerjoin(
                user_tags,
                and_(
                    list_table.c.item_id == user_tags.c.item_id,
                    list_table.c.user_id == user_tags.c.user_id,
                ),
            )
            .with_only_columns(user_tags.c.tag, list_table.c.item_id)
            .where(condition)
            .subquery("lt")
        )

        await self.registry.create(tags_stage)
        await self.registry.connection.execute(
            insert(tags_stage).from_select(
                ["item_id"], select(list_tags.c.item_id).distinct()
            )
        )
        logger.debug("Staged tag filter", extra={"tags": names, "untagged": untagged})

        return query.join(tags_stage, list_table.c.item_id == tags_stage.c.item_id).distinct()


def _reject_deleted(states: Iterable[SavedItemStatus]) -> None:
    if SavedItemStatus.DELETED in states:
        raise UserInputError(
            "Deleted saves cannot be listed by status; use the dedicated delete operations.",
            extra={"status": SavedItemStatus.DELETED.value},
        )


__all__ = ["FilterCompiler"]
