"""
Database fixtures for persistence and journey tests.

Two backends are provided:

- ``sqlite_session``: an in-memory SQLite database (aiosqlite), rebuilt for
  every test. Fast enough for unit-level repository tests and e2e journeys.
- ``db_session``: an ephemeral PostgreSQL started with Testcontainers, for
  ``@pytest.mark.integration`` tests.

Usage:
    # In your test file or conftest.py
    from tests.shared.fixtures.database import db_session

    async def test_something(db_session):
        repo = UserRepositorySQLAlchemy(db_session)
        await repo.save(user)
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Import models to register them with IdentityBase.metadata
import keygate_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from keygate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase

# Use same Postgres version as production
POSTGRES_IMAGE = "postgres:16-alpine"

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


def _session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def sqlite_engine():
    """
    In-memory SQLite engine with all identity tables created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        SQLITE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_session_maker(sqlite_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return _session_maker(sqlite_engine)


@pytest_asyncio.fixture(scope="function")
async def sqlite_session(sqlite_session_maker):
    """Provide a session on a fresh in-memory database."""
    async with sqlite_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="session")
def postgres_container():
    """
    Start a PostgreSQL container for the test session.

    The container is shared across all tests in the session for performance.
    Each test gets a clean database state via table drop/create.
    """
    # Imported lazily so unit runs do not need Docker bindings
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(POSTGRES_IMAGE) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def async_engine(postgres_container):
    """
    Create an async SQLAlchemy engine connected to the test container.

    Session-scoped to avoid recreating the engine for each test.
    """
    connection_url = postgres_container.get_connection_url()
    # Testcontainers may return postgresql+psycopg2:// or postgresql://
    async_url = connection_url.replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )
    async_url = async_url.replace("postgresql://", "postgresql+asyncpg://")

    return create_async_engine(
        async_url,
        echo=False,
        poolclass=NullPool,  # Avoid connection pool issues in tests
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine):
    """
    Provide an isolated PostgreSQL session for each test.

    Tables are dropped and recreated before the test and dropped again
    afterwards, so each test starts from an empty schema.
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
        await conn.run_sync(IdentityBase.metadata.create_all)

    async with _session_maker(async_engine)() as session:
        yield session
        await session.rollback()

    async with async_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
