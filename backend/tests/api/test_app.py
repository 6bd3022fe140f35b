"""Application Assembly - lifespan creates the schema and aborts on store failure."""

import logging

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from user_api.core.errors import DatabaseError
from user_api.infrastructure.database import DatabaseSessionManager
from user_api.main import create_app


@pytest.fixture(autouse=True)
def _no_root_handlers(monkeypatch):
    monkeypatch.setattr("user_api.main.setup_logging", lambda *args: None)


async def test_lifespan_creates_users_table(settings):
    db = DatabaseSessionManager(settings.database_url, poolclass=StaticPool)
    app = create_app(settings, db=db)

    async with app.router.lifespan_context(app):
        async with db.engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names(),
            )
        assert "users" in tables


async def test_lifespan_aborts_when_schema_creation_fails(
    settings, unreachable_db, caplog,
):
    caplog.set_level(logging.ERROR, logger="user_api")
    app = create_app(settings, db=unreachable_db)

    with pytest.raises(DatabaseError):
        async with app.router.lifespan_context(app):
            pass
    assert [r for r in caplog.records if r.getMessage() == "migration failed"]


async def test_app_state_holds_injected_dependencies(settings, db_manager):
    app = create_app(settings, db=db_manager)
    assert app.state.db is db_manager
    assert app.state.user_repository is not None
    assert app.state.logger.extra == {"service_name": "go-user-api", "env": "production"}
