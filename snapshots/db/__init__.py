"""Database utilities for the snapshot store."""

from .models import Base, Link, Post, Snapshot  # noqa: F401
from .session import get_engine, get_sessionmaker, init_db, session_scope  # noqa: F401

__all__ = [
    "Base",
    "Link",
    "Post",
    "Snapshot",
    "get_engine",
    "get_sessionmaker",
    "init_db",
    "session_scope",
]
