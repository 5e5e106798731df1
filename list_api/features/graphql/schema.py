"""GraphQL schema assembly.

Builds the root Query from the feature resolvers and creates the schema
with the configured extensions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry
from strawberry.extensions import QueryDepthLimiter

from list_api.core.settings import get_graphql_settings
from list_api.features.graphql.error_handler import log_error
from list_api.features.graphql.resolvers.saves_queries import (
    saved_item_by_id_query,
    saved_item_by_url_query,
    saved_items_query,
)
from list_api.features.graphql.resolvers.tags_queries import tag_query, tags_query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers, scoped to the user from the request headers."""

    saved_items = strawberry.field(
        resolver=saved_items_query,
        description="A page of the user's saves",
    )
    saved_item_by_id = strawberry.field(
        resolver=saved_item_by_id_query,
        description="A single save by item id",
    )
    saved_item_by_url = strawberry.field(
        resolver=saved_item_by_url_query,
        description="A single save by the URL it was saved with",
    )
    tags = strawberry.field(resolver=tags_query, description="The user's tags by name")
    tag = strawberry.field(resolver=tag_query, description="A single tag by name or id")


class ListSchema(strawberry.Schema):
    """Schema that logs execution errors through the application logger."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            log_error(error, execution_context)


def create_schema() -> ListSchema:
    """Create the schema with settings-based extensions."""
    settings = get_graphql_settings()
    return ListSchema(
        query=Query,
        extensions=[QueryDepthLimiter(max_depth=settings.max_query_depth)],
    )


schema = create_schema()

logger.debug("GraphQL schema created successfully")

__all__ = ["ListSchema", "Query", "create_schema", "schema"]
