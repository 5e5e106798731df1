"""Normalization of connection pagination arguments.

Runs before any query is issued so the engine only ever sees one of
``{first, after?}`` or ``{last, before?}`` with a page size in range.
"""

from __future__ import annotations

import logging

from list_api.core.exceptions import UserInputError

from .schemas import PaginationInput

logger = logging.getLogger(__name__)

INVALID_COMBINATION = "Please set either {after and first} or {before and last}"


def validate_pagination(
    pagination: PaginationInput | None,
    default_page_size: int,
    max_page_size: int,
) -> PaginationInput:
    """Validate and normalize pagination arguments.

    Rules:
        - No arguments: the first ``default_page_size`` rows.
        - ``before`` with ``after``, ``before`` with ``first``, ``last`` with
          ``after``, and ``first`` with ``last`` are rejected.
        - A cursor without a page size, or a page size below 1, gets the
          default size.
        - Page sizes above ``max_page_size`` are clamped to it.

    Args:
        pagination: Arguments as received, or None.
        default_page_size: Size used when none is usable.
        max_page_size: Upper bound on the page size.

    Returns:
        Normalized arguments with exactly one of ``first``/``last`` set.

    Raises:
        UserInputError: If the combination of arguments is ambiguous.
    """
    if pagination is None:
        return PaginationInput(first=default_page_size)

    first, after, last, before = (
        pagination.first,
        pagination.after,
        pagination.last,
        pagination.before,
    )

    if (
        (before is not None and after is not None)
        or (before is not None and first is not None)
        or (last is not None and after is not None)
        or (first is not None and last is not None)
    ):
        raise UserInputError(INVALID_COMBINATION)

    if last is not None or before is not None:
        size = _normalize_size(last, default_page_size, max_page_size)
        return PaginationInput(last=size, before=before)

    size = _normalize_size(first, default_page_size, max_page_size)
    return PaginationInput(first=size, after=after)


def _normalize_size(size: int | None, default_page_size: int, max_page_size: int) -> int:
    if size is None or size <= 0:
        return default_page_size
    if size > max_page_size:
        logger.debug("Clamping page size %s to %s", size, max_page_size)
        return max_page_size
    return size


__all__ = ["INVALID_COMBINATION", "validate_pagination"]
