"""Schemas for the tags feature.

Tags are not stored as entities: a tag is the set of ``item_tags`` rows
that share a name for one user. Its id is the base64 of the name.
"""

from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field

from list_api.core.exceptions import UserInputError
from list_api.core.pagination.schemas import Connection

# Sentinel tag name that matches saves without any tag
UNTAGGED = "_untagged_"

MAX_TAG_LENGTH = 25


def clean_and_validate_tag(name: str) -> str:
    """Normalize a tag name the way it is stored.

    Surrounding whitespace is removed and the name is cut to the column
    width.

    Raises:
        UserInputError: If nothing but whitespace is left.

    Example:
        >>> clean_and_validate_tag("  reading list  ")
        'reading list'
    """
    cleaned = name.strip()
    if not cleaned:
        raise UserInputError("Tag name must have at least 1 non-whitespace character.")
    return cleaned[:MAX_TAG_LENGTH]


def split_tag_filter(names: list[str]) -> tuple[list[str], bool]:
    """Split a tag filter into cleaned names and the untagged flag.

    Returns:
        Tuple of (distinct cleaned names in request order, whether
        ``_untagged_`` was requested).
    """
    untagged = False
    cleaned: list[str] = []
    for name in names:
        if name == UNTAGGED:
            untagged = True
            continue
        tag = clean_and_validate_tag(name)
        if tag not in cleaned:
            cleaned.append(tag)
    return cleaned, untagged


def encode_tag_id(name: str) -> str:
    """Opaque id of a tag."""
    return base64.b64encode(name.encode()).decode()


def decode_tag_id(tag_id: str) -> str:
    """Tag name behind an id produced by encode_tag_id.

    Raises:
        UserInputError: If the id is not valid base64 text.
    """
    try:
        return base64.b64decode(tag_id.encode(), validate=True).decode()
    except (binascii.Error, UnicodeError) as e:
        raise UserInputError(f"Invalid tag id: {tag_id!r}") from e


class Tag(BaseModel):
    """A user's tag and the saves it is applied to."""

    id: str
    name: str
    saved_item_ids: list[str] = Field(default_factory=list)
    created_at: int | None = None
    updated_at: int | None = None

    model_config = ConfigDict(frozen=True)


TagConnection = Connection[Tag]

__all__ = [
    "MAX_TAG_LENGTH",
    "UNTAGGED",
    "Tag",
    "TagConnection",
    "clean_and_validate_tag",
    "decode_tag_id",
    "encode_tag_id",
    "split_tag_filter",
]
