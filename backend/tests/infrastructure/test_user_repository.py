"""SQL User Repository - statements against the in-memory SQLite store."""

import pytest

from user_api.core.errors import DatabaseError
from user_api.infrastructure.database import DatabaseSessionManager
from user_api.infrastructure.user_repository import SqlUserRepository


@pytest.fixture
def repo(db_manager):
    return SqlUserRepository(db_manager)


async def test_insert_assigns_increasing_ids(repo):
    first = await repo.insert("A", "a@x.com")
    second = await repo.insert("B", "b@x.com")
    assert first > 0
    assert second > first


async def test_get_row_returns_plain_dict(repo):
    user_id = await repo.insert("A", "a@x.com")
    assert await repo.get_row(user_id) == {"id": user_id, "name": "A", "email": "a@x.com"}


async def test_get_row_missing_returns_none(repo):
    assert await repo.get_row(12345) is None


async def test_list_rows_returns_every_row(repo):
    await repo.insert("A", "a@x.com")
    await repo.insert("B", "b@x.com")
    rows = await repo.list_rows()
    assert sorted(r["name"] for r in rows) == ["A", "B"]


async def test_update_reports_rows_affected(repo):
    user_id = await repo.insert("A", "a@x.com")
    assert await repo.update(user_id, "Z", "z@x.com") == 1
    assert await repo.update(user_id + 100, "Z", "z@x.com") == 0
    assert (await repo.get_row(user_id))["name"] == "Z"


async def test_delete_reports_rows_affected(repo):
    user_id = await repo.insert("A", "a@x.com")
    assert await repo.delete(user_id) == 1
    assert await repo.delete(user_id) == 0
    assert await repo.get_row(user_id) is None


async def test_ping_succeeds_on_reachable_store(repo):
    await repo.ping()


async def test_ping_raises_database_error_when_unreachable(unreachable_db):
    with pytest.raises(DatabaseError) as exc_info:
        await SqlUserRepository(unreachable_db).ping()
    assert exc_info.value.http_status == 500
    assert exc_info.value.cause


async def test_create_schema_is_idempotent(db_manager, repo):
    user_id = await repo.insert("A", "a@x.com")
    await db_manager.create_schema()
    assert await repo.get_row(user_id) is not None


async def test_create_schema_fails_when_unreachable(unreachable_db):
    with pytest.raises(DatabaseError):
        await unreachable_db.create_schema()


async def test_ping_maps_unwrapped_driver_error_to_database_error():
    async def refuse_connection():
        raise RuntimeError("password authentication failed")

    db = DatabaseSessionManager("sqlite+aiosqlite://", async_creator=refuse_connection)
    try:
        with pytest.raises(DatabaseError) as exc_info:
            await SqlUserRepository(db).ping()
    finally:
        await db.dispose()
    assert "password authentication failed" in exc_info.value.cause
