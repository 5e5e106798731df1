"""DataLoaders for batch-loading saves and tags.

DataLoaders batch and cache lookups within a single request, preventing
N+1 queries when many saves resolve their tags, or when the gateway
resolves many save references at once.

Each GraphQL request gets its own DataLoader instances to ensure proper
batching boundaries and cache isolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from strawberry.dataloader import DataLoader

from list_api.features.saves.queries import SavedItemQueryService
from list_api.features.tags.service import TagDataService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from list_api.features.saves.schemas import SavedItem
    from list_api.features.tags.schemas import Tag


class SavedItemDataLoaders:
    """Batch loaders for saves by id and by URL.

    Usage:
        loaders = SavedItemDataLoaders(session, user_id)
        save = await loaders.by_id.load("1234")
        save = await loaders.by_url.load("https://example.com/a")
    """

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        self._service = SavedItemQueryService(session, user_id)
        self.by_id: DataLoader[str, SavedItem | None] = DataLoader(load_fn=self._batch_by_id)
        self.by_url: DataLoader[str, SavedItem | None] = DataLoader(load_fn=self._batch_by_url)

    async def _batch_by_id(self, ids: list[str]) -> list[SavedItem | None]:
        saves = {save.id: save for save in await self._service.get_by_ids(ids)}
        # Return in same order as requested, None for missing
        return [saves.get(str(id_)) for id_ in ids]

    async def _batch_by_url(self, urls: list[str]) -> list[SavedItem | None]:
        saves = {save.url: save for save in await self._service.get_by_urls(urls)}
        return [saves.get(url) for url in urls]


@dataclass
class DataLoaders:
    """Container for all DataLoader instances.

    One instance created per GraphQL request.

    Usage in resolver:
        ctx = info.context
        tags = await ctx.loaders.tags_by_saved_item.load(save.id)
    """

    saved_items_by_id: DataLoader[str, SavedItem | None]
    saved_items_by_url: DataLoader[str, SavedItem | None]
    tags_by_saved_item: DataLoader[str, list[Tag]]


def create_dataloaders(session: AsyncSession, user_id: int) -> DataLoaders:
    """Factory for creating request-scoped DataLoaders.

    Args:
        session: Database session for the current request
        user_id: Authenticated user the lookups are scoped to
    """
    saved_items = SavedItemDataLoaders(session, user_id)
    tags = TagDataService(session, user_id)
    return DataLoaders(
        saved_items_by_id=saved_items.by_id,
        saved_items_by_url=saved_items.by_url,
        tags_by_saved_item=DataLoader(load_fn=tags.get_tags_for_saved_items),
    )


__all__ = ["DataLoaders", "SavedItemDataLoaders", "create_dataloaders"]
