"""Root conftest - shared test configuration and store fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Tests never reach a real PostgreSQL server

Design Decisions:
    - StaticPool: one shared connection, so the in-memory database survives
      across sessions within a test
"""

import os

import pytest
from sqlalchemy.pool import StaticPool

from user_api.config import Settings
from user_api.infrastructure.database import DatabaseSessionManager

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)


@pytest.fixture
def settings():
    return Settings(database_url=TEST_DATABASE_URL, log_format="text")


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager(TEST_DATABASE_URL, poolclass=StaticPool)
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
async def unreachable_db(tmp_path):
    """Store whose database file lives in a directory that does not exist."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'users.db'}"
    manager = DatabaseSessionManager(url)
    yield manager
    await manager.dispose()
