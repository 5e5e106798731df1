"""Unified settings composition for convenient access.

Usage:
    from list_api.core.settings import get_settings

    settings = get_settings()
    print(settings.app.environment)
    print(settings.pagination.max_page_size)

Each nested settings class still respects its own env prefix. Code that
needs a single domain should prefer the individual get_*_settings()
loaders.
"""

from __future__ import annotations

from dataclasses import dataclass

from .app import AppSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .loader import (
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings


@dataclass(frozen=True)
class Settings:
    """All settings domains under one object."""

    app: AppSettings
    db: DatabaseSettings
    logging: LoggingSettings
    pagination: PaginationSettings
    graphql: GraphQLSettings

    @property
    def environment(self) -> str:
        """Shortcut for ``app.environment``."""
        return self.app.environment


def get_settings() -> Settings:
    """Compose the cached per-domain settings."""
    return Settings(
        app=get_app_settings(),
        db=get_db_settings(),
        logging=get_logging_settings(),
        pagination=get_pagination_settings(),
        graphql=get_graphql_settings(),
    )
