"""Error Hierarchy - typed, categorized exceptions for all User API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status it is rendered with
    - Error responses have empty bodies; the status code is the whole contract

Design Decisions:
    - Single hierarchy with UserApiError base: one FastAPI handler renders and logs all of them
    - Severity drives the log level (WARNING -> logger.warning, everything else -> logger.error)
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class UserApiError(Exception):
    """Base exception for all User API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        log_fields: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.log_fields = log_fields or {}


# ─── Client Errors (400-level) ──────────────────────────────────

class MalformedBodyError(UserApiError):
    """Request body could not be decoded into the expected JSON shape."""
    def __init__(self, detail: str):
        super().__init__(
            "decode failed", "MALFORMED_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400, {"error": detail},
        )


class ResourceNotFoundError(UserApiError):
    """Requested resource does not exist (or could not be read)."""
    def __init__(
        self, resource_id: int | str, message: str = "user not found",
    ):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404, {"user_id": resource_id},
        )
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UserApiError):
    """Database operation failed."""
    def __init__(
        self, message: str, operation: str, cause: str | None = None,
        user_id: int | str | None = None,
    ):
        fields: dict = {"error": cause or message}
        if user_id is not None:
            fields["user_id"] = user_id
        super().__init__(
            message, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 500, fields,
        )
        self.operation = operation
        self.cause = cause

    def during(self, message: str, user_id: int | str | None = None) -> "DatabaseError":
        """Re-label a store failure with the handler-level event name."""
        return DatabaseError(message, self.operation, self.cause or self.message, user_id)
