"""User API - FastAPI application factory and process entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Logger, store client and repository constructed once per app, kept on app.state
    - Middleware order (outermost first): CORS -> trace id -> JSON content type
    - Schema created on startup via lifespan; a failure aborts startup (non-zero exit)

Design Decisions:
    - create_app factory instead of a module-level app: tests inject a store
      (db=...) or a fake repository (repository=...) without touching globals
    - Lifespan over @app.on_event: engine disposed on orderly shutdown
    - uvicorn runs with lifespan="on" so startup failures terminate the process
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from user_api.api.error_handlers import register_error_handlers
from user_api.api.middleware import (
    CORSPolicyMiddleware, JSONContentTypeMiddleware, TraceIdMiddleware,
)
from user_api.api.routes import health, users
from user_api.config import Settings, get_settings
from user_api.core.errors import DatabaseError
from user_api.core.repository_protocols import UserRepository
from user_api.infrastructure.database import DatabaseSessionManager
from user_api.infrastructure.observability import (
    build_service_logger, setup_logging,
)
from user_api.infrastructure.user_repository import SqlUserRepository


def create_app(
    settings: Settings | None = None,
    db: DatabaseSessionManager | None = None,
    repository: UserRepository | None = None,
) -> FastAPI:
    """Build the application with its store client and logger wired in."""
    settings = settings or get_settings()
    logger = build_service_logger(settings.service_name, settings.environment)
    db = db or DatabaseSessionManager(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        try:
            await db.create_schema()
        except DatabaseError as e:
            logger.error("migration failed", extra={"error": e.cause or e.message})
            raise
        logger.info("User API started")
        yield
        logger.info("User API shutting down")
        await db.dispose()

    app = FastAPI(title="User API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.logger = logger
    app.state.db = db
    app.state.user_repository = repository or SqlUserRepository(db)

    # add_middleware prepends: the last one added is the outermost
    app.add_middleware(JSONContentTypeMiddleware)
    app.add_middleware(TraceIdMiddleware, logger=logger)
    app.add_middleware(
        CORSPolicyMiddleware,
        allow_origin=settings.cors_allow_origin,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    return app


def run() -> None:
    """Console entry point: serve the app factory with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "user_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
    )


if __name__ == "__main__":
    run()
