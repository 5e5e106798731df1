"""FastAPI dependencies shared by the routers."""

from .auth import get_api_id, get_user_id
from .database import get_db_session, get_session_factory

__all__ = ["get_api_id", "get_db_session", "get_session_factory", "get_user_id"]
