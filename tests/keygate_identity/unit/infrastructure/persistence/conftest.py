"""In-memory SQLite fixtures for repository tests."""

from tests.shared.fixtures.database import (
    sqlite_engine,
    sqlite_session,
    sqlite_session_maker,
)

__all__ = [
    "sqlite_engine",
    "sqlite_session",
    "sqlite_session_maker",
]
