"""Health & Readiness - liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /healthz always returns 200 "OK" if the process is up (liveness)
    - GET /ready returns 503 if the store is unreachable (readiness)
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from user_api.api.dependencies import get_request_context, get_user_repository
from user_api.core.errors import DatabaseError
from user_api.core.repository_protocols import UserRepository
from user_api.core.request_context import RequestContext

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
async def liveness_check():
    """Basic liveness check. Never touches the store."""
    return "OK"


@router.get("/ready")
async def readiness_check(
    ctx: RequestContext = Depends(get_request_context),
    users: UserRepository = Depends(get_user_repository),
):
    """Readiness check - pings the store."""
    try:
        await users.ping()
    except DatabaseError as exc:
        ctx.logger.error(
            "healthcheck: db unreachable", extra={"error": exc.cause or exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "error": "database unreachable"},
        )
    return {"status": "healthy"}
