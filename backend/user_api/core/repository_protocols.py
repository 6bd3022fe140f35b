"""Boundary Protocols - contract between route handlers and the store.

Invariants:
    - Handlers NEVER import SQLAlchemy; they only see this Protocol
    - Rows cross the boundary as plain dicts ({"id", "name", "email"})
    - Every store failure surfaces as DatabaseError (core/errors.py)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Rows stay undecoded here; handlers decide what an undecodable row means
      (skip while listing, 404 on get, 500 on update read-back)
"""

from typing import Protocol


class UserRepository(Protocol):
    """Contract for user persistence - implemented by infrastructure."""
    async def list_rows(self) -> list[dict]: ...
    async def get_row(self, user_id: int) -> dict | None: ...
    async def insert(self, name: str, email: str) -> int: ...
    async def update(self, user_id: int, name: str, email: str) -> int: ...
    async def delete(self, user_id: int) -> int: ...
    async def ping(self) -> None: ...
