"""GraphQL test fixtures.

Provides:
- A GraphQL context bound to the in-memory SQLite database
- Sample saves with tags
- Query documents shared by the tests
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from list_api.features.graphql.context import GraphQLContext
from list_api.features.graphql.dataloaders import create_dataloaders
from tests.conftest import USER_ID, T, make_save, make_tag

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from tests.conftest import Seeder


SAVED_ITEMS_QUERY = """
    query SavedItems(
        $filter: SavedItemsFilter
        $sort: SavedItemsSort
        $pagination: PaginationInput
    ) {
        savedItems(filter: $filter, sort: $sort, pagination: $pagination) {
            totalCount
            pageInfo {
                hasNextPage
                hasPreviousPage
                startCursor
                endCursor
            }
            edges {
                cursor
                node {
                    id
                    url
                    status
                    isFavorite
                    _createdAt
                }
            }
        }
    }
"""

SAVED_ITEM_QUERY = """
    query SavedItem($id: ID!) {
        savedItemById(id: $id) {
            id
            url
            title
            isArchived
            archivedAt
            _createdAt
            _deletedAt
            item {
                __typename
                ... on Item { givenUrl resolvedId }
                ... on PendingItem { url status }
            }
            tags { name _createdAt }
        }
    }
"""

TAGS_QUERY = """
    query Tags($pagination: PaginationInput) {
        tags(pagination: $pagination) {
            totalCount
            pageInfo { hasNextPage endCursor }
            nodes { id name }
        }
    }
"""

TAG_SAVED_ITEMS_QUERY = """
    query TagSavedItems($name: String!) {
        tag(name: $name) {
            name
            savedItems(pagination: {first: 10}) {
                totalCount
                nodes { id }
            }
        }
    }
"""


@pytest.fixture
def graphql_context(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
) -> GraphQLContext:
    """Create a GraphQL context for testing.

    Note: This is a synchronous fixture because GraphQLContext is a dataclass.
    """
    return GraphQLContext(
        user_id=USER_ID,
        api_id="5513",
        session=db_session,
        session_factory=session_factory,
        loaders=create_dataloaders(db_session, USER_ID),
    )


@pytest.fixture
async def sample_saves(seed: Seeder) -> None:
    """Three saves; 1 and 2 tagged ``python``, 2 archived, 3 unresolved."""
    await seed.add(
        make_save(1, T, favorite=1, favorited=T),
        make_save(2, T + 1, status=1, read=T + 30),
        make_save(3, T + 2, resolved_id=0),
        make_tag(1, "python", added=T + 3),
        make_tag(2, "python", added=T + 4),
        make_tag(2, "news", added=T + 5),
    )
