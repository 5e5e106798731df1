"""Unit tests for connection assembly from a staged window."""

from __future__ import annotations

import pytest

from list_api.core.pagination import CursorCodec, PaginationInput
from list_api.features.saves.assembler import assemble_connection
from list_api.features.saves.schemas import ListRow, SavedItemsSort


def rows(*item_ids: int) -> list[ListRow]:
    return [
        ListRow(
            item_id=item_id,
            resolved_id=item_id,
            given_url=f"https://example.com/{item_id}",
            given_title="",
            favorite=0,
            status=0,
            time_added=1_600_000_000 + item_id,
            time_updated=0,
            time_read=0,
            time_favorited=0,
        )
        for item_id in item_ids
    ]


SORT = SavedItemsSort()


def ids(connection) -> list[str]:
    return [node.id for node in connection.nodes]


@pytest.mark.unit
class TestForwardPages:
    """Tests for first/after windows."""

    def test_extra_row_sets_has_next_and_is_dropped(self):
        connection = assemble_connection(rows(3, 2, 1), SORT, PaginationInput(first=2), 3)

        assert ids(connection) == ["3", "2"]
        assert connection.page_info.has_next_page
        assert not connection.page_info.has_previous_page
        assert connection.total_count == 3

    def test_short_window_has_no_next(self):
        connection = assemble_connection(rows(3, 2), SORT, PaginationInput(first=2), 2)

        assert ids(connection) == ["3", "2"]
        assert not connection.page_info.has_next_page

    def test_after_cursor_sets_has_previous(self):
        pagination = PaginationInput(first=2, after="cursor")
        connection = assemble_connection(rows(2), SORT, pagination, 3)

        assert connection.page_info.has_previous_page
        assert not connection.page_info.has_next_page


@pytest.mark.unit
class TestBackwardPages:
    """Tests for last/before windows."""

    def test_extra_row_is_dropped_from_the_start(self):
        connection = assemble_connection(rows(4, 3, 2), SORT, PaginationInput(last=2), 3)

        assert ids(connection) == ["3", "2"]
        assert connection.page_info.has_previous_page
        assert not connection.page_info.has_next_page

    def test_before_cursor_sets_has_next(self):
        pagination = PaginationInput(last=2, before="cursor")
        connection = assemble_connection(rows(3, 2), SORT, pagination, 5)

        assert ids(connection) == ["3", "2"]
        assert connection.page_info.has_next_page
        assert not connection.page_info.has_previous_page


@pytest.mark.unit
class TestCursors:
    """Tests for edge and page cursors."""

    def test_cursors_encode_item_and_sort_value(self):
        connection = assemble_connection(rows(7, 6), SORT, PaginationInput(first=5), 2)

        assert connection.edges[0].cursor == CursorCodec.encode(7, 1_600_000_007)
        assert connection.page_info.start_cursor == connection.edges[0].cursor
        assert connection.page_info.end_cursor == connection.edges[-1].cursor

    def test_empty_window(self):
        connection = assemble_connection([], SORT, PaginationInput(first=5), 0)

        assert connection.edges == []
        assert connection.page_info.start_cursor is None
        assert connection.page_info.end_cursor is None
        assert not connection.page_info.has_next_page
