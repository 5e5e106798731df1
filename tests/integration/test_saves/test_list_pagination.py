"""Integration tests for ListPaginationService against SQLite."""

from __future__ import annotations

import pytest

from list_api.core.exceptions import UserInputError
from list_api.core.pagination import CursorCodec, PaginationInput
from list_api.core.settings import PaginationSettings
from list_api.features.saves import (
    ListPaginationService,
    SavedItemsFilter,
    SavedItemsSort,
    SortBy,
    SortOrder,
)
from tests.conftest import OTHER_USER_ID, USER_ID, T, make_save

pytestmark = pytest.mark.integration

ASC = SavedItemsSort(sort_order=SortOrder.ASC)


def ids(connection) -> list[str]:
    return [node.id for node in connection.nodes]


@pytest.fixture
def service(db_session):
    return ListPaginationService(db_session, USER_ID)


@pytest.fixture
async def tied_saves(seed):
    """Two saves added in the same second and one a second later."""
    await seed.add(make_save(1, T), make_save(2, T), make_save(3, T + 1))


class TestForwardPagination:
    """Paging with first/after."""

    async def test_first_page_newest_first(self, service, tied_saves):
        page = await service.get_page(pagination=PaginationInput(first=2))

        assert ids(page) == ["3", "2"]
        assert page.page_info.has_next_page
        assert not page.page_info.has_previous_page
        assert page.total_count == 3

    async def test_walk_through_tied_sort_values(self, service, tied_saves):
        """Rows sharing a timestamp are neither repeated nor skipped across pages."""
        seen: list[str] = []
        after = None
        for _ in range(3):
            page = await service.get_page(pagination=PaginationInput(first=1, after=after))
            seen.extend(ids(page))
            after = page.page_info.end_cursor

        assert seen == ["3", "2", "1"]
        assert not page.page_info.has_next_page
        assert page.page_info.has_previous_page

    async def test_ascending_walk(self, service, tied_saves):
        first = await service.get_page(sort=ASC, pagination=PaginationInput(first=2))
        second = await service.get_page(
            sort=ASC,
            pagination=PaginationInput(first=2, after=first.page_info.end_cursor),
        )

        assert ids(first) == ["1", "2"]
        assert ids(second) == ["3"]
        assert not second.page_info.has_next_page

    async def test_cursor_carries_sort_value(self, service, tied_saves):
        page = await service.get_page(pagination=PaginationInput(first=1))

        assert CursorCodec.decode(page.edges[0].cursor) == ("3", T + 1)

    async def test_empty_list(self, service):
        page = await service.get_page()

        assert page.edges == []
        assert page.total_count == 0
        assert not page.page_info.has_next_page
        assert page.page_info.end_cursor is None


class TestBackwardPagination:
    """Paging with last/before."""

    async def test_last_page_without_cursor(self, service, tied_saves):
        page = await service.get_page(pagination=PaginationInput(last=2))

        assert ids(page) == ["2", "1"]
        assert page.page_info.has_previous_page
        assert not page.page_info.has_next_page

    async def test_walk_backward(self, service, tied_saves):
        last = await service.get_page(pagination=PaginationInput(last=2))
        previous = await service.get_page(
            pagination=PaginationInput(last=2, before=last.page_info.start_cursor)
        )

        assert ids(previous) == ["3"]
        assert not previous.page_info.has_previous_page
        assert previous.page_info.has_next_page

    async def test_last_ascending_mirrors_first_descending(self, service, seed):
        await seed.add(*(make_save(item_id, T + item_id) for item_id in range(1, 6)))

        newest = await service.get_page(pagination=PaginationInput(first=3))
        oldest_last = await service.get_page(sort=ASC, pagination=PaginationInput(last=3))

        assert ids(newest) == ["5", "4", "3"]
        assert ids(oldest_last) == ["3", "4", "5"]
        assert list(reversed(ids(oldest_last))) == ids(newest)


class TestHeavyCollisions:
    """Walks through more rows sharing one sort value than fit on a page."""

    @pytest.fixture
    async def seven_tied(self, seed):
        await seed.add(*(make_save(item_id, T) for item_id in range(1, 8)))

    @pytest.mark.parametrize(
        ("sort_order", "expected"),
        [(SortOrder.DESC, list("7654321")), (SortOrder.ASC, list("1234567"))],
    )
    async def test_forward_walk(self, service, seven_tied, sort_order, expected):
        """Tied rows after the cursor fill each page without reading past the tie."""
        sort = SavedItemsSort(sort_order=sort_order)
        seen: list[str] = []
        after = None
        for _ in range(len(expected)):
            page = await service.get_page(
                sort=sort, pagination=PaginationInput(first=2, after=after)
            )
            seen.extend(ids(page))
            if not page.page_info.has_next_page:
                break
            after = page.page_info.end_cursor

        assert seen == expected

    @pytest.mark.parametrize(
        ("sort_order", "expected"),
        [(SortOrder.DESC, list("7654321")), (SortOrder.ASC, list("1234567"))],
    )
    async def test_backward_walk(self, service, seven_tied, sort_order, expected):
        sort = SavedItemsSort(sort_order=sort_order)
        seen: list[str] = []
        before = None
        for _ in range(len(expected)):
            page = await service.get_page(
                sort=sort, pagination=PaginationInput(last=3, before=before)
            )
            seen[:0] = ids(page)
            if not page.page_info.has_previous_page:
                break
            before = page.page_info.start_cursor

        assert seen == expected
        assert ids(page) == expected[:1]


class TestCursorErrors:
    """Cursors that cannot be resumed from."""

    async def test_unknown_item_is_not_found(self, service, tied_saves, temp_table_names):
        cursor = CursorCodec.encode(99, T)

        with pytest.raises(UserInputError, match="Cursor not found."):
            await service.get_page(pagination=PaginationInput(first=2, after=cursor))

        assert await temp_table_names() == []

    async def test_stale_sort_value_is_not_found(self, service, tied_saves):
        cursor = CursorCodec.encode(3, T + 50)

        with pytest.raises(UserInputError, match="Cursor not found."):
            await service.get_page(pagination=PaginationInput(first=2, after=cursor))

    @pytest.mark.parametrize(
        "cursor",
        ["not a cursor", CursorCodec.encode("abc", T), "MTIzNA=="],
    )
    async def test_malformed_cursor(self, service, tied_saves, cursor):
        with pytest.raises(UserInputError, match="Cursor not found."):
            await service.get_page(pagination=PaginationInput(first=2, after=cursor))

    async def test_session_usable_after_failure(self, service, tied_saves, temp_table_names):
        with pytest.raises(UserInputError):
            await service.get_page(
                pagination=PaginationInput(first=1, after=CursorCodec.encode(99, T))
            )

        page = await service.get_page(pagination=PaginationInput(first=1))

        assert ids(page) == ["3"]
        assert await temp_table_names() == []

    async def test_new_session_after_failure(self, session_factory, tied_saves, temp_table_names):
        """A failed fetch leaves nothing behind on the shared connection."""
        async with session_factory() as session:
            with pytest.raises(UserInputError, match="Cursor not found."):
                await ListPaginationService(session, USER_ID).get_page(
                    pagination=PaginationInput(first=5, after=CursorCodec.encode(999999, T))
                )

        assert await temp_table_names() == []

        async with session_factory() as session:
            page = await ListPaginationService(session, USER_ID).get_page()

        assert ids(page) == ["3", "2", "1"]

    async def test_cursor_beyond_collision_limit(self, db_session, tied_saves):
        """Only the first rows sharing a sort value are searched for the cursor row."""
        service = ListPaginationService(
            db_session, USER_ID, settings=PaginationSettings(collision_scan_limit=1)
        )

        with pytest.raises(UserInputError, match="Cursor not found."):
            await service.get_page(
                pagination=PaginationInput(first=1, after=CursorCodec.encode(1, T))
            )

    async def test_invalid_argument_combination(self, service):
        with pytest.raises(UserInputError):
            await service.get_page(pagination=PaginationInput(first=1, last=1))


class TestSortOptions:
    """Sorting by the other timestamps."""

    async def test_unset_timestamps_sort_as_zero(self, service, seed):
        await seed.add(
            make_save(1, favorited=T + 5, favorite=1),
            make_save(2),
            make_save(3),
            make_save(4, favorited=T + 1, favorite=1),
        )
        sort = SavedItemsSort(sort_by=SortBy.FAVORITED_AT)

        first = await service.get_page(sort=sort, pagination=PaginationInput(first=2))
        second = await service.get_page(
            sort=sort, pagination=PaginationInput(first=2, after=first.page_info.end_cursor)
        )
        third = await service.get_page(
            sort=sort, pagination=PaginationInput(first=2, after=second.page_info.end_cursor)
        )

        assert ids(first) == ["1", "4"]
        assert ids(second) == ["3", "2"]
        assert second.nodes[0].favorited_at is None
        assert CursorCodec.decode(second.page_info.end_cursor) == ("2", 0)
        assert ids(third) == []

    async def test_updated_at(self, service, seed):
        await seed.add(make_save(1, T, updated=T + 10), make_save(2, T + 5))

        page = await service.get_page(sort=SavedItemsSort(sort_by=SortBy.UPDATED_AT))

        assert ids(page) == ["1", "2"]


class TestScopeAndCount:
    """User isolation, scoping ids and totals."""

    async def test_other_users_saves_excluded(self, service, seed):
        await seed.add(make_save(1), make_save(2, user_id=OTHER_USER_ID))

        page = await service.get_page()

        assert ids(page) == ["1"]
        assert page.total_count == 1

    async def test_scoping_ids(self, service, tied_saves):
        page = await service.get_page(scoping_ids=[1, 3])

        assert ids(page) == ["3", "1"]
        assert page.total_count == 2

    async def test_empty_scoping_ids(self, service, tied_saves):
        page = await service.get_page(scoping_ids=[])

        assert page.edges == []
        assert page.total_count == 0

    async def test_total_count_ignores_pagination(self, service, tied_saves):
        page = await service.get_page(
            filter=SavedItemsFilter(updated_since=T - 1), pagination=PaginationInput(first=1)
        )

        assert len(page.edges) == 1
        assert page.total_count == 3

    async def test_total_count_is_bounded(self, db_session, tied_saves):
        service = ListPaginationService(
            db_session, USER_ID, settings=PaginationSettings(total_count_limit=2)
        )

        page = await service.get_page()

        assert len(page.edges) == 3
        assert page.total_count == 2


class TestTransactions:
    """Temporary table lifetime and transaction handling."""

    async def test_temp_tables_dropped_after_page(self, service, tied_saves, temp_table_names):
        await service.get_page(filter=SavedItemsFilter(tag_names=["x"], is_highlighted=False))

        assert await temp_table_names() == []

    async def test_inside_caller_transaction(self, db_session, tied_saves, temp_table_names):
        service = ListPaginationService(db_session, USER_ID)

        async with db_session.begin():
            page = await service.get_page(pagination=PaginationInput(first=2))
            again = await service.get_page(
                pagination=PaginationInput(first=2, after=page.page_info.end_cursor)
            )

        assert ids(page) == ["3", "2"]
        assert ids(again) == ["1"]
        assert await temp_table_names() == []
