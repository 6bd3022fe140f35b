"""FastAPI dependencies - expose per-request context and the shared store client."""

from fastapi import Request

from user_api.core.repository_protocols import UserRepository
from user_api.core.request_context import RequestContext


def get_request_context(request: Request) -> RequestContext:
    """RequestContext installed by TraceIdMiddleware."""
    return request.state.context


def get_user_repository(request: Request) -> UserRepository:
    """Repository built once in create_app."""
    return request.app.state.user_repository
