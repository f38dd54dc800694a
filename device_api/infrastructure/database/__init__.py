"""Database infrastructure helpers (engine, sessions, migrations)."""

from .base import Base
from .session import get_engine, init_db, session_scope

__all__ = ["Base", "get_engine", "init_db", "session_scope"]
