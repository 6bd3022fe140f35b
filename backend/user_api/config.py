"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - The store is identified by a single variable: DATABASE_URL
    - get_settings() is cached (lru_cache) - single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - libpq-style URLs (postgres://, postgresql://, ?sslmode=) are rewritten for asyncpg
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNCPG_SCHEME = "postgresql+asyncpg://"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/users"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Rewrite libpq URLs into the asyncpg dialect SQLAlchemy expects."""
        if not isinstance(v, str):
            return v
        for scheme in ("postgres://", "postgresql://"):
            if v.startswith(scheme):
                v = v.replace(scheme, _ASYNCPG_SCHEME, 1)
                break
        if v.startswith(_ASYNCPG_SCHEME):
            v = v.replace("sslmode=", "ssl=")
        return v

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Identity (attached to every log line)
    service_name: str = "go-user-api"
    environment: str = "production"

    # CORS
    cors_allow_origin: str = "*"
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type", "X-Trace-Id"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
