"""User Schemas - Pydantic models for the HTTP boundary.

Invariants:
    - UserWrite never carries an id (any id in the body is ignored)
    - Missing name/email decode as "" ; non-string values are malformed
    - UserRead requires string name/email: a NULL column is an undecodable row

Design Decisions:
    - No length/format validation: structural JSON decoding only
    - decode_user_row raises pydantic.ValidationError; callers choose the policy
"""

from pydantic import BaseModel


class UserWrite(BaseModel):
    """Body of create and update requests."""
    name: str = ""
    email: str = ""


class UserRead(BaseModel):
    """User as returned to clients."""
    id: int
    name: str
    email: str


def decode_user_row(row: dict) -> UserRead:
    """Decode a store row into UserRead; raises ValidationError on bad columns."""
    return UserRead.model_validate(row)
