"""Saved items: models, filters and the cursor pagination engine."""

from .queries import SavedItemQueryService
from .schemas import (
    ContentType,
    SavedItem,
    SavedItemConnection,
    SavedItemsFilter,
    SavedItemsSort,
    SavedItemStatus,
    SortBy,
    SortOrder,
)
from .service import ListPaginationService

__all__ = [
    "ContentType",
    "ListPaginationService",
    "SavedItem",
    "SavedItemConnection",
    "SavedItemQueryService",
    "SavedItemStatus",
    "SavedItemsFilter",
    "SavedItemsSort",
    "SortBy",
    "SortOrder",
]
