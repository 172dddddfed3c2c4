"""Database engines and session factory.

Two engines are built from the same URL: an async one, used at startup to
create the tables, and a sync one backing the request-scoped sessions. Local
development falls back to SQLite when the configured database cannot be
reached.
"""

from __future__ import annotations

import logging
import os
from time import perf_counter
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker

from merge_api.core.config import settings

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URL = "sqlite+aiosqlite:///./merge_local.db"

# Populated by ``configure_database``.
async_engine: AsyncEngine
sync_engine: Engine
SessionLocal: sessionmaker


def _sync_url_for(async_url: str) -> tuple[str, dict[str, Any]]:
    """Return the synchronous driver URL matching ``async_url``."""

    url = make_url(async_url)
    connect_args: dict[str, Any] = {}

    if url.drivername.startswith("postgresql+"):
        url = url.set(drivername="postgresql+psycopg2")
    elif url.drivername == "sqlite+aiosqlite":
        url = url.set(drivername="sqlite")
        connect_args["check_same_thread"] = False

    return url.render_as_string(hide_password=False), connect_args


def _sqlite_fallback_allowed() -> bool:
    if os.getenv("DISABLE_SQLITE_FALLBACK") == "1":
        return False
    return (settings.ENVIRONMENT or "").lower() in {"development", "local"}


def _install_slow_query_logger(engine: Engine) -> None:
    """Warn about statements slower than ``SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS``."""

    threshold_ms = max(settings.SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS or 0, 0)
    if threshold_ms == 0 or getattr(engine, "_merge_slow_query_hook", False):
        return
    engine._merge_slow_query_hook = True

    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        context._merge_query_start = perf_counter()

    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start = getattr(context, "_merge_query_start", None)
        if start is None:
            return

        elapsed_ms = (perf_counter() - start) * 1000.0
        if elapsed_ms < threshold_ms:
            return

        statement_preview = " ".join(str(statement).split())
        if len(statement_preview) > 200:
            statement_preview = statement_preview[:197] + "..."
        logger.warning("Slow SQL (%.1f ms) - %s", elapsed_ms, statement_preview)

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)
    event.listen(engine, "after_cursor_execute", _after_cursor_execute)


def configure_database(database_url: str | None = None, *, allow_fallback: bool = True) -> None:
    """Initialise the engines and the session factory.

    ``database_url`` defaults to ``settings.DATABASE_URL``. When the database
    is unreachable in a development environment the SQLite fallback is used
    instead of failing the import.
    """

    global async_engine, sync_engine, SessionLocal

    async_url = str(database_url or settings.DATABASE_URL)
    logger.info("Configuring database: %s", make_url(async_url).render_as_string(hide_password=True))

    candidate_async_engine = create_async_engine(async_url, echo=False)
    sync_url, sync_connect_args = _sync_url_for(async_url)
    candidate_sync_engine = create_engine(sync_url, pool_pre_ping=True, connect_args=sync_connect_args)

    _install_slow_query_logger(candidate_sync_engine)

    try:
        with candidate_sync_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except (OperationalError, OSError) as exc:
        if allow_fallback and _sqlite_fallback_allowed():
            logger.warning("Database %s unreachable (%s). Falling back to SQLite.", async_url, exc)
            candidate_sync_engine.dispose()
            candidate_async_engine.sync_engine.dispose()
            configure_database(SQLITE_FALLBACK_URL, allow_fallback=False)
            return

        logger.error("Database connection failed: %s", exc)
        raise

    async_engine = candidate_async_engine
    sync_engine = candidate_sync_engine
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sync_engine)


configure_database()
