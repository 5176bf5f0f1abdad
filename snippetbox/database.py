"""
Snippetbox — Database Engine & Session Management
===================================================

What:  Async SQLAlchemy engine construction, session factory, request
       dependency, and UTC time SQL helpers.
Why:   Centralizes all database connection logic in one place.
How:   The application factory builds one engine per app (stored on
       app.state) from the configured DSN; each request gets its own session
       that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and by
       services through the session they receive.
When:  Engine is created with the app; sessions are created per-request.

Connection Pooling Strategy:
    pool_size / max_overflow come from Settings; pool_pre_ping catches stale
    connections after a MySQL restart; pool_recycle=3600 stays below MySQL's
    default wait_timeout. SQLite engines (tests, local runs) use the dialect's
    own pool and receive none of these options.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import DateTime, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import FunctionElement

from snippetbox.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with a shared metadata object, which Alembic reads
    for migrations and tests use to create tables.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured data source name.

    Pool sizing only applies to server databases; SQLite's pool classes
    reject pool_size/max_overflow.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the engine.

    expire_on_commit=False: attributes stay readable after commit without a
    lazy load, which async sessions cannot perform implicitly.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def ping(engine: AsyncEngine) -> None:
    """
    What:  Verifies the database is reachable by running SELECT 1.
    When:  At startup (fatal on failure) and from the health check.
    Raises: Whatever the driver raises; callers decide how fatal it is.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()


# ══════════════════════════════════════════════════════════════════════════
# UTC Time SQL Helpers
# ══════════════════════════════════════════════════════════════════════════
#
# Creation and expiry timestamps are computed by the database clock, never by
# the application, so that `expires > now` comparisons use one clock.
# Each construct compiles to the dialect's own UTC expression.


class utc_now(FunctionElement):
    """Current UTC timestamp evaluated by the database."""

    type = DateTime()
    name = "utc_now"
    inherit_cache = True


@compiles(utc_now)
def _utc_now_default(element, compiler, **kw):
    # SQLite's CURRENT_TIMESTAMP is UTC
    return "CURRENT_TIMESTAMP"


@compiles(utc_now, "mysql")
def _utc_now_mysql(element, compiler, **kw):
    return "UTC_TIMESTAMP()"


@compiles(utc_now, "postgresql")
def _utc_now_postgresql(element, compiler, **kw):
    return "(now() AT TIME ZONE 'utc')"


class utc_days_from_now(FunctionElement):
    """UTC timestamp `days` days after the database's current time."""

    type = DateTime()
    name = "utc_days_from_now"
    inherit_cache = True


@compiles(utc_days_from_now)
def _utc_days_from_now_default(element, compiler, **kw):
    return "datetime('now', %s || ' days')" % compiler.process(element.clauses, **kw)


@compiles(utc_days_from_now, "mysql")
def _utc_days_from_now_mysql(element, compiler, **kw):
    return "DATE_ADD(UTC_TIMESTAMP(), INTERVAL %s DAY)" % compiler.process(
        element.clauses, **kw
    )


@compiles(utc_days_from_now, "postgresql")
def _utc_days_from_now_postgresql(element, compiler, **kw):
    return "((now() AT TIME ZONE 'utc') + make_interval(days => %s))" % compiler.process(
        element.clauses, **kw
    )
