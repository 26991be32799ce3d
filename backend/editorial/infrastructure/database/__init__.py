from .base import Base
from .session import build_engine, build_session_factory, get_db_session, session_scope
from . import models  # noqa: F401  (registers tables on Base.metadata)

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "get_db_session",
    "session_scope",
]
