"""Cursor-based pagination primitives.

- ``CursorCodec``: opaque cursor encoding of (item id, sort value)
- ``validate_pagination``: argument validation and page size defaults
- ``Connection``/``Edge``/``PageInfo``: Relay-style response shapes
"""

from .cursor import CursorCodec, InvalidCursorError
from .schemas import Connection, Edge, PageInfo, PaginationInput
from .validation import INVALID_COMBINATION, validate_pagination

__all__ = [
    "INVALID_COMBINATION",
    "Connection",
    "CursorCodec",
    "Edge",
    "InvalidCursorError",
    "PageInfo",
    "PaginationInput",
    "validate_pagination",
]
