"""
Database module for SQLAlchemy models and session management.
"""

from bidflow.db.base import Base
from bidflow.db.session import close_db, get_engine, get_session_factory, session_scope

__all__ = ["Base", "close_db", "get_engine", "get_session_factory", "session_scope"]
