"""Tags derived from item_tags."""

from .schemas import (
    UNTAGGED,
    Tag,
    TagConnection,
    clean_and_validate_tag,
    decode_tag_id,
    encode_tag_id,
)
from .service import TagDataService

__all__ = [
    "UNTAGGED",
    "Tag",
    "TagConnection",
    "TagDataService",
    "clean_and_validate_tag",
    "decode_tag_id",
    "encode_tag_id",
]
