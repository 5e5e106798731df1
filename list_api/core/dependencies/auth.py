"""Caller identity from gateway headers.

Authentication happens upstream; the gateway forwards the authenticated
user id in ``userid`` and the calling application in ``apiid``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header

from list_api.core.exceptions import UnauthorizedException
from list_api.infra.logging import set_log_context

DEFAULT_API_ID = "0"


async def get_user_id(userid: Annotated[str | None, Header()] = None) -> int:
    """Authenticated user id.

    Raises:
        UnauthorizedException: If the header is missing or not an integer.
    """
    if userid is None or not userid.strip().isdigit():
        raise UnauthorizedException()
    user_id = int(userid)
    set_log_context(user_id=user_id)
    return user_id


async def get_api_id(apiid: Annotated[str | None, Header()] = None) -> str:
    """Id of the calling application, ``"0"`` when not forwarded."""
    return apiid or DEFAULT_API_ID
