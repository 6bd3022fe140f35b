"""SQL User Repository - UserRepository implementation over DatabaseSessionManager.

Invariants:
    - One statement per method call, committed immediately (no multi-statement transactions)
    - Rows returned as plain dicts; decoding is the caller's concern
    - update/delete report rows affected; zero is not an error here
"""

from sqlalchemy import delete, insert, select, update

from user_api.infrastructure.database import DatabaseSessionManager
from user_api.models.user import User


class SqlUserRepository:
    """Store client shared by all handlers; holds only the session manager."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def list_rows(self) -> list[dict]:
        async with self._db.session() as session:
            result = await session.execute(
                select(User.id, User.name, User.email),
            )
            return [dict(row) for row in result.mappings().all()]

    async def get_row(self, user_id: int) -> dict | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(User.id, User.name, User.email).where(User.id == user_id),
            )
            row = result.mappings().one_or_none()
            return dict(row) if row is not None else None

    async def insert(self, name: str, email: str) -> int:
        """Insert a row and return the store-assigned id."""
        async with self._db.session() as session:
            result = await session.execute(
                insert(User).values(name=name, email=email).returning(User.id),
            )
            user_id = result.scalar_one()
            await session.commit()
            return user_id

    async def update(self, user_id: int, name: str, email: str) -> int:
        async with self._db.session() as session:
            result = await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(name=name, email=email),
            )
            await session.commit()
            return result.rowcount

    async def delete(self, user_id: int) -> int:
        async with self._db.session() as session:
            result = await session.execute(
                delete(User).where(User.id == user_id),
            )
            await session.commit()
            return result.rowcount

    async def ping(self) -> None:
        await self._db.ping()
