"""Integration tests for saved item filters."""

from __future__ import annotations

import pytest

from list_api.core.exceptions import UserInputError
from list_api.core.pagination import PaginationInput
from list_api.features.saves import (
    ContentType,
    ListPaginationService,
    SavedItemsFilter,
    SavedItemStatus,
)
from tests.conftest import (
    OTHER_USER_ID,
    USER_ID,
    T,
    make_extended,
    make_highlight,
    make_save,
    make_tag,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def service(db_session):
    return ListPaginationService(db_session, USER_ID)


@pytest.fixture
async def library(seed):
    """Five saves covering every filterable attribute.

    1: unread, favorite, tagged python+news, highlighted, article
    2: archived, tagged python, video
    3: hidden, untagged, article
    4: unread, untagged, updated late, inactive highlight
    5: deleted
    """
    await seed.add(
        make_save(1, T + 1, favorite=1, favorited=T + 1),
        make_save(2, T + 2, status=1, read=T + 2),
        make_save(3, T + 3, status=3),
        make_save(4, T + 4, updated=T + 100),
        make_save(5, T + 5, status=2),
        make_tag(1, "python"),
        make_tag(1, "news"),
        make_tag(2, "python"),
        make_tag(4, "python", user_id=OTHER_USER_ID),
        make_highlight(1),
        make_highlight(4, status=0),
        make_highlight(3, user_id=OTHER_USER_ID),
        make_extended(1, is_article=1),
        make_extended(2, video=1),
        make_extended(3, is_article=1),
    )


async def filtered_ids(service, **rules) -> list[str]:
    page = await service.get_page(
        filter=SavedItemsFilter(**rules), pagination=PaginationInput(first=50)
    )
    return [node.id for node in page.nodes]


class TestScalarFilters:
    """Filters on columns of ``list``."""

    async def test_updated_since_is_exclusive(self, service, library):
        assert await filtered_ids(service, updated_since=T + 4) == ["5", "4"]
        assert await filtered_ids(service, updated_since=T + 5) == ["4"]

    async def test_is_favorite(self, service, library):
        assert await filtered_ids(service, is_favorite=True) == ["1"]
        assert "1" not in await filtered_ids(service, is_favorite=False)

    async def test_is_archived(self, service, library):
        assert await filtered_ids(service, is_archived=True) == ["2"]
        assert await filtered_ids(service, is_archived=False) == ["5", "4", "3", "1"]

    async def test_status(self, service, library):
        assert await filtered_ids(service, status=SavedItemStatus.HIDDEN) == ["3"]
        assert await filtered_ids(service, status=SavedItemStatus.UNREAD) == ["4", "1"]

    async def test_states(self, service, library):
        states = [SavedItemStatus.ARCHIVED, SavedItemStatus.HIDDEN]
        assert await filtered_ids(service, states=states) == ["3", "2"]

    @pytest.mark.parametrize("field", ["status", "states"])
    async def test_deleted_status_rejected(self, service, library, field, temp_table_names):
        value = SavedItemStatus.DELETED if field == "status" else [SavedItemStatus.DELETED]

        with pytest.raises(UserInputError, match="Deleted saves"):
            await filtered_ids(service, **{field: value})

        assert await temp_table_names() == []


class TestJoinedFilters:
    """Filters that join other tables."""

    async def test_is_highlighted(self, service, library):
        assert await filtered_ids(service, is_highlighted=True) == ["1"]

    async def test_not_highlighted(self, service, library):
        """Inactive highlights and other users' highlights do not count."""
        assert await filtered_ids(service, is_highlighted=False) == ["5", "4", "3", "2"]

    async def test_content_type(self, service, library):
        assert await filtered_ids(service, content_type=ContentType.VIDEO) == ["2"]
        assert await filtered_ids(service, content_type=ContentType.ARTICLE) == ["3", "1"]


class TestTagFilter:
    """Filtering by tag names and the untagged sentinel."""

    async def test_single_tag(self, service, library):
        assert await filtered_ids(service, tag_names=["python"]) == ["2", "1"]

    async def test_any_of_several_tags_without_duplicates(self, service, library):
        page = await service.get_page(filter=SavedItemsFilter(tag_names=["python", "news"]))

        assert [node.id for node in page.nodes] == ["2", "1"]
        assert page.total_count == 2

    async def test_untagged(self, service, library):
        """Tags of other users do not make a save tagged."""
        assert await filtered_ids(service, tag_names=["_untagged_"]) == ["5", "4", "3"]

    async def test_tag_or_untagged(self, service, library):
        assert await filtered_ids(service, tag_names=["news", "_untagged_"]) == [
            "5",
            "4",
            "3",
            "1",
        ]

    async def test_names_are_cleaned(self, service, library):
        assert await filtered_ids(service, tag_names=["  news "]) == ["1"]

    async def test_empty_list_is_no_op(self, service, library):
        assert len(await filtered_ids(service, tag_names=[])) == 5

    async def test_blank_name_rejected(self, service, library):
        with pytest.raises(UserInputError, match="non-whitespace"):
            await filtered_ids(service, tag_names=["python", "  "])

    async def test_paginates_with_tag_filter(self, service, library):
        tagged = SavedItemsFilter(tag_names=["python", "news"])
        first = await service.get_page(filter=tagged, pagination=PaginationInput(first=1))
        second = await service.get_page(
            filter=tagged,
            pagination=PaginationInput(first=1, after=first.page_info.end_cursor),
        )

        assert [node.id for node in first.nodes] == ["2"]
        assert [node.id for node in second.nodes] == ["1"]
        assert not second.page_info.has_next_page


class TestComposition:
    """Rules combine conjunctively."""

    async def test_tag_and_archived(self, service, library):
        assert await filtered_ids(service, tag_names=["python"], is_archived=False) == ["1"]

    async def test_all_joins_together(self, service, library):
        assert (
            await filtered_ids(
                service,
                is_highlighted=True,
                content_type=ContentType.ARTICLE,
                tag_names=["news"],
                is_favorite=True,
            )
            == ["1"]
        )

    async def test_no_match(self, service, library):
        assert await filtered_ids(service, is_favorite=True, is_archived=True) == []

    async def test_redundant_rules_match_either_alone(self, service, library):
        archived = await filtered_ids(service, is_archived=True)
        by_status = await filtered_ids(service, status=SavedItemStatus.ARCHIVED)
        both = await filtered_ids(service, is_archived=True, status=SavedItemStatus.ARCHIVED)

        assert archived == by_status == both == ["2"]

    async def test_combined_rules_intersect(self, service, library):
        not_favorite = set(await filtered_ids(service, is_favorite=False))
        archived = set(await filtered_ids(service, is_archived=True))
        both = await filtered_ids(service, is_favorite=False, is_archived=True)

        assert set(both) == not_favorite & archived
        assert both == ["2"]
