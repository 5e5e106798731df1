"""Pagination settings for saved item and tag connections.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=30, PAGINATION_MAX_PAGE_SIZE=100
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size used when a request carries none, or a
            non-positive one.
        max_page_size: Hard upper bound on a single page.
        collision_scan_limit: Maximum number of rows sharing the cursor's sort
            value that are staged when resuming from a cursor.
        total_count_limit: Cap on the rows counted for ``totalCount``.
    """

    default_page_size: int = Field(
        default=30,
        ge=1,
        le=1000,
        description="Default page size when first/last is not specified",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    collision_scan_limit: int = Field(
        default=5000,
        ge=1,
        le=100_000,
        description="Maximum rows staged for a sort-value collision set",
    )
    total_count_limit: int = Field(
        default=5000,
        ge=1,
        le=1_000_000,
        description="Maximum rows counted for totalCount",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
