"""Cursor encoding and decoding for saved item pagination.

Cursors are opaque strings that identify the last row a client has seen.
They carry the row's item id and the epoch value of the active sort
column at the time the page was served:

    base64("{item_id}_*_{sort_value}")

The item id is authoritative for locating the row again; the sort value
only narrows the range that has to be scanned, since many rows can share
one timestamp.

Example:
    >>> CursorCodec.encode("1234", 1600000000)
    'MTIzNF8qXzE2MDAwMDAwMDA='
    >>> CursorCodec.decode('MTIzNF8qXzE2MDAwMDAwMDA=')
    ('1234', 1600000000)
"""

from __future__ import annotations

import base64
import binascii

SEPARATOR = "_*_"

# Spellings of an absent sort value accepted when decoding
NULL_MARKERS = frozenset({"null", "undefined", "None", ""})


class InvalidCursorError(ValueError):
    """Raised when a cursor string cannot be decoded."""


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        cursor = CursorCodec.encode(item_id, sort_value)
        item_id, sort_value = CursorCodec.decode(cursor)
    """

    @staticmethod
    def encode(item_id: str | int, sort_value: int | None) -> str:
        """Encode a row position to an opaque string.

        Args:
            item_id: Identifier of the row. Must not contain the separator.
            sort_value: Epoch seconds of the sort column, or None when unset.

        Returns:
            Standard base64 encoded cursor.
        """
        item_id = str(item_id)
        if SEPARATOR in item_id:
            raise InvalidCursorError(f"Item id may not contain {SEPARATOR!r}: {item_id!r}")
        value = "null" if sort_value is None else str(int(sort_value))
        return base64.b64encode(f"{item_id}{SEPARATOR}{value}".encode()).decode()

    @staticmethod
    def decode(cursor: str) -> tuple[str, int | None]:
        """Decode a cursor string.

        Args:
            cursor: Base64 encoded cursor string.

        Returns:
            Tuple of (item_id, sort_value). The sort value is None when the
            cursor carries one of the null markers.

        Raises:
            InvalidCursorError: If the cursor is not valid base64, lacks the
                separator, has an empty item id, or carries a non-integer
                sort value.
        """
        try:
            raw = base64.b64decode(cursor.encode(), validate=True).decode()
        except (binascii.Error, UnicodeError) as e:
            raise InvalidCursorError(f"Invalid cursor: {e}") from e

        item_id, separator, value = raw.partition(SEPARATOR)
        if not separator or not item_id:
            raise InvalidCursorError(f"Invalid cursor: {raw!r}")

        if value in NULL_MARKERS:
            return item_id, None
        try:
            return item_id, int(value)
        except ValueError as e:
            raise InvalidCursorError(f"Invalid cursor sort value: {value!r}") from e


__all__ = ["NULL_MARKERS", "SEPARATOR", "CursorCodec", "InvalidCursorError"]
