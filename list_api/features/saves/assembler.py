"""Assembly of a saved items connection from a staged window of rows."""

from __future__ import annotations

from collections.abc import Sequence

from list_api.core.pagination import CursorCodec, Edge, PageInfo, PaginationInput
from list_api.features.saves.schemas import (
    ListRow,
    SavedItem,
    SavedItemConnection,
    SavedItemsSort,
    row_to_entity,
)


def assemble_connection(
    rows: Sequence[ListRow],
    sort: SavedItemsSort,
    pagination: PaginationInput,
    total_count: int,
) -> SavedItemConnection:
    """Build the connection for a window of up to ``page_size + 1`` rows.

    ``rows`` are in requested sort order. For a forward page the extra row
    sits at the end; for a backward page it sits at the start. The flag for
    the opposite direction is set only when the request carried a cursor.
    """
    size = pagination.page_size

    if pagination.is_backward:
        has_previous_page = len(rows) > size
        has_next_page = pagination.before is not None
        start = 1 if has_previous_page else 0
        page = rows[start : start + size]
    else:
        has_next_page = len(rows) > size
        has_previous_page = pagination.after is not None
        page = rows[:size]

    edges = [
        Edge[SavedItem](
            node=row_to_entity(row),
            cursor=CursorCodec.encode(row.item_id, row.sort_value(sort)),
        )
        for row in page
    ]

    return SavedItemConnection(
        edges=edges,
        page_info=PageInfo(
            has_previous_page=has_previous_page,
            has_next_page=has_next_page,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        ),
        total_count=total_count,
    )


__all__ = ["assemble_connection"]
