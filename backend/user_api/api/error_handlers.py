"""Error Handlers - global exception handlers for the User API.

Invariants:
    - UserApiError -> its http_status with an empty body
    - RequestValidationError -> 400, empty body
    - Unexpected exceptions are caught by TraceIdMiddleware (api/middleware.py), inside
      the CORS layer, so the 500 still carries the trace id and CORS headers
    - Every handled error is logged once, through the request's trace-bound logger

Design Decisions:
    - Two handler layers here: domain (UserApiError) and validation (Pydantic)
    - Log level follows ErrorSeverity: WARNING -> warning, anything else -> error
"""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError

from user_api.core.errors import ErrorSeverity, MalformedBodyError, UserApiError

_fallback_logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_user_api_error_handler(app)
    _register_validation_error_handler(app)


def _request_logger(request: Request) -> logging.LoggerAdapter | logging.Logger:
    context = getattr(request.state, "context", None)
    return context.logger if context is not None else _fallback_logger


def _render(request: Request, exc: UserApiError) -> Response:
    log = _request_logger(request)
    extra = {
        **exc.log_fields,
        "error_code": exc.code,
        "path": request.url.path,
        "method": request.method,
    }
    if exc.severity == ErrorSeverity.WARNING:
        log.warning(exc.message, extra=extra)
    else:
        log.error(exc.message, extra=extra)
    return Response(status_code=exc.http_status)


def _register_user_api_error_handler(app: FastAPI) -> None:
    """Register User API domain/infrastructure error handler."""

    @app.exception_handler(UserApiError)
    async def user_api_error_handler(request: Request, exc: UserApiError):
        return _render(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        return _render(request, MalformedBodyError(_describe(exc)))


def _describe(exc: RequestValidationError) -> str:
    """Flatten Pydantic errors into one log-friendly line."""
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
