import sys
from typing import List, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    ENVIRONMENT: str = "development"

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:5173",
    ]
    FRONTEND_BASE_URL: Optional[str] = None

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300

    # Seed data created on startup
    DEFAULT_ADMIN_EXTERNAL_ID: Optional[str] = None
    DEFAULT_ADMIN_NAME: str = "admin"
    DEFAULT_LANGUAGES: List[str] = ["typescript", "javascript", "python", "rust", "go", "sql"]

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Upgrade Postgres URLs to the asyncpg driver.

        Managed Postgres providers still hand out ``postgres://`` URLs, which
        SQLAlchemy no longer understands. ``postgresql://`` and psycopg URLs
        are rewritten as well so the async engine can boot; SQLite and other
        backends are left untouched.
        """

        if not isinstance(value, str):
            return value

        if "+asyncpg" in value:
            return value

        for prefix in ("postgres://", "postgresql://", "postgresql+psycopg2://", "postgresql+psycopg://"):
            if value.startswith(prefix):
                return "postgresql+asyncpg://" + value[len(prefix):]

        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Print every missing or invalid environment variable to stderr.

    The error is raised while the module is imported, so it would otherwise
    be buried in a long traceback.
    """

    print("Configuration error while loading environment variables:", file=sys.stderr)

    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Unknown validation error")
        type_name = error.get("type")
        if type_name:
            message = f"{message} (type={type_name})"
        print(f"  - {location}: {message}", file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
