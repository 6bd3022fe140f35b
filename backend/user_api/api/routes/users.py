"""User Routes - CRUD over the `users` table.

Invariants:
    - Handlers are thin: parse -> one or two repository calls -> JSON
    - Bodies are decoded as JSON whatever the Content-Type header says; a body that
      does not decode into UserWrite is a 400 and never reaches the store
    - A path id that is not an integer fails like a store error on that endpoint
      (get/delete -> 404, update -> 500)
    - Every log line goes through ctx.logger (carries trace_id)

Design Decisions:
    - Listing skips rows that fail to decode and still returns 200
    - Update is a blind write followed by a separate read-back (not transactional);
      a missing row on read-back is a 500
    - Delete runs its statement once; only an execution error maps to 404,
      zero rows affected still reports success
"""

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from user_api.api.dependencies import get_request_context, get_user_repository
from user_api.core.errors import (
    DatabaseError, MalformedBodyError, ResourceNotFoundError,
)
from user_api.core.repository_protocols import UserRepository
from user_api.core.request_context import RequestContext
from user_api.schemas.user import UserRead, UserWrite, decode_user_row

router = APIRouter(prefix="/api/go/users", tags=["users"])

USER_DELETED = "User deleted"


async def decode_body(request: Request) -> UserWrite:
    """Decode the raw request body; Content-Type is not consulted."""
    try:
        return UserWrite.model_validate_json(await request.body())
    except ValidationError as exc:
        raise MalformedBodyError(str(exc))


def parse_user_id(raw: str) -> int | None:
    """Integer id from the path, or None when it is not one."""
    try:
        return int(raw)
    except ValueError:
        return None


@router.get("", response_model=list[UserRead])
async def list_users(
    ctx: RequestContext = Depends(get_request_context),
    users: UserRepository = Depends(get_user_repository),
):
    """List every user; undecodable rows are logged and skipped."""
    try:
        rows = await users.list_rows()
    except DatabaseError as exc:
        raise exc.during("query failed")

    result: list[UserRead] = []
    for row in rows:
        try:
            result.append(decode_user_row(row))
        except ValidationError as exc:
            ctx.logger.error(
                "scan failed", extra={"error": str(exc), "user_id": row.get("id")},
            )
    ctx.logger.info("users listed", extra={"count": len(result)})
    return result


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    users: UserRepository = Depends(get_user_repository),
):
    """Fetch one user; a missing row or any store failure is a 404."""
    parsed_id = parse_user_id(user_id)
    user = None
    if parsed_id is not None:
        try:
            row = await users.get_row(parsed_id)
            user = decode_user_row(row) if row is not None else None
        except (DatabaseError, ValidationError):
            user = None
    if user is None:
        raise ResourceNotFoundError(user_id if parsed_id is None else parsed_id)
    return user


@router.post("", response_model=UserRead)
async def create_user(
    body: UserWrite = Depends(decode_body),
    ctx: RequestContext = Depends(get_request_context),
    users: UserRepository = Depends(get_user_repository),
):
    """Insert a user and echo it back with the store-assigned id."""
    try:
        user_id = await users.insert(body.name, body.email)
    except DatabaseError as exc:
        raise exc.during("insert failed")

    ctx.logger.info("user created", extra={"user_id": user_id})
    return UserRead(id=user_id, name=body.name, email=body.email)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    body: UserWrite = Depends(decode_body),
    ctx: RequestContext = Depends(get_request_context),
    users: UserRepository = Depends(get_user_repository),
):
    """Replace name/email, then return the row as the store now holds it."""
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        raise DatabaseError(
            "update failed", "query", f"invalid user id {user_id!r}", user_id,
        )
    try:
        await users.update(parsed_id, body.name, body.email)
    except DatabaseError as exc:
        raise exc.during("update failed", parsed_id)

    try:
        row = await users.get_row(parsed_id)
    except DatabaseError as exc:
        raise exc.during("post-update fetch failed", parsed_id)
    if row is None:
        raise DatabaseError(
            "post-update fetch failed", "query", "no rows in result set", parsed_id,
        )
    try:
        updated = decode_user_row(row)
    except ValidationError as exc:
        raise DatabaseError(
            "post-update fetch failed", "query", str(exc), parsed_id,
        )

    ctx.logger.info("user updated", extra={"user_id": parsed_id})
    return updated


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    ctx: RequestContext = Depends(get_request_context),
    users: UserRepository = Depends(get_user_repository),
) -> str:
    """Delete a user; only a statement execution error yields 404."""
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        raise ResourceNotFoundError(user_id, "delete failed: user not found")
    try:
        await users.delete(parsed_id)
    except DatabaseError:
        raise ResourceNotFoundError(parsed_id, "delete failed: user not found")

    ctx.logger.info("user deleted", extra={"user_id": parsed_id})
    return USER_DELETED
