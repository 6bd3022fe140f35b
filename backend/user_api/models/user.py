"""User ORM - the single persisted entity.

Invariants:
    - id is an auto-incrementing integer primary key (SERIAL on PostgreSQL)
    - name and email are unconstrained, nullable TEXT columns
    - No uniqueness beyond the primary key
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from user_api.db.base import Base


class User(Base):
    """A user row in the `users` table."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
