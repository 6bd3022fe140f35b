"""Database Session Manager - async engine with rollback, error mapping, and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - ping() maps every failure to DatabaseError (readiness never sees a raw driver error)
    - No logging here: handlers log the cause through the trace-bound request logger
    - create_schema() is idempotent (CREATE TABLE IF NOT EXISTS semantics)

Design Decisions:
    - One manager per application, built in create_app and handed to the repository
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Pool left at driver defaults; extra engine kwargs only for tests (e.g. StaticPool)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from user_api.core.errors import DatabaseError
from user_api.db.base import Base
import user_api.models  # noqa: F401


class DatabaseSessionManager:
    """Manages async database sessions with rollback, error mapping, and ping."""

    def __init__(self, database_url: str, **engine_kwargs):
        self.engine = create_async_engine(
            database_url, pool_pre_ping=True, **engine_kwargs,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            raise DatabaseError("Integrity constraint violated", "commit", str(e))
        except OperationalError as e:
            await session.rollback()
            raise DatabaseError("Connection or operational error", "execute", str(e))
        except DBAPIError as e:
            await session.rollback()
            raise DatabaseError("Database driver error", "query", str(e))
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", "unknown", str(e))
        except OSError as e:
            await session.rollback()
            raise DatabaseError("Database unreachable", "connect", str(e))
        finally:
            await session.close()

    async def ping(self) -> None:
        """Round-trip to the store; raises DatabaseError if unreachable.

        Any failure counts: drivers raise their own exception types at connect
        time (e.g. asyncpg authentication errors) that SQLAlchemy does not wrap.
        """
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError("Database unreachable", "connect", str(e))

    async def create_schema(self) -> None:
        """Create missing tables; existing tables are left untouched."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError("Schema creation failed", "migrate", str(e))
        except OSError as e:
            raise DatabaseError("Database unreachable", "connect", str(e))

    async def dispose(self) -> None:
        await self.engine.dispose()
