"""API test fixtures - FastAPI test clients over a real or fake store.

Invariants:
    - client: app wired to the in-memory SQLite store (schema already created)
    - fake_client: app wired to FakeUserRepository, with per-operation failure injection

Design Decisions:
    - httpx ASGITransport does not run the lifespan; fixtures create the schema directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from user_api.core.errors import DatabaseError
from user_api.main import create_app


class FakeUserRepository:
    """In-memory UserRepository that records calls and fails on demand.

    failing: operations that raise DatabaseError; crashing: operations that
    raise an unexpected RuntimeError.
    """

    def __init__(self):
        self.rows: dict[int, dict] = {}
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self.crashing: set[str] = set()
        self._next_id = 1

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.crashing:
            raise RuntimeError("boom")
        if operation in self.failing:
            raise DatabaseError(
                "Connection or operational error", "execute", "connection refused",
            )

    async def list_rows(self) -> list[dict]:
        self._enter("list_rows")
        return [dict(row) for row in self.rows.values()]

    async def get_row(self, user_id: int) -> dict | None:
        self._enter("get_row")
        row = self.rows.get(user_id)
        return dict(row) if row is not None else None

    async def insert(self, name: str, email: str) -> int:
        self._enter("insert")
        user_id = self._next_id
        self._next_id += 1
        self.rows[user_id] = {"id": user_id, "name": name, "email": email}
        return user_id

    async def update(self, user_id: int, name: str, email: str) -> int:
        self._enter("update")
        if user_id not in self.rows:
            return 0
        self.rows[user_id].update(name=name, email=email)
        return 1

    async def delete(self, user_id: int) -> int:
        self._enter("delete")
        return 1 if self.rows.pop(user_id, None) is not None else 0

    async def ping(self) -> None:
        self._enter("ping")


def _client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(settings, db_manager):
    """FastAPI test client backed by the in-memory SQLite store."""
    async with _client_for(create_app(settings, db=db_manager)) as c:
        yield c


@pytest.fixture
def fake_store():
    return FakeUserRepository()


@pytest.fixture
async def fake_client(settings, db_manager, fake_store):
    """FastAPI test client whose handlers talk to FakeUserRepository."""
    app = create_app(settings, db=db_manager, repository=fake_store)
    async with _client_for(app) as c:
        yield c


@pytest.fixture
async def unreachable_client(settings, unreachable_db):
    """FastAPI test client whose store cannot be opened."""
    async with _client_for(create_app(settings, db=unreachable_db)) as c:
        yield c
