"""
Database connection and session management.

Provides the async SQLAlchemy engine and session factory used by the
FastAPI dependencies. Both are created lazily on first use.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from geac_api.core.config import settings

logger = logging.getLogger(__name__)

_async_engine: AsyncEngine | None = None
_async_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    """Pool options for the given URL.

    SQLite drivers use a single-connection pool that rejects sizing arguments.
    """
    if url.startswith("sqlite"):
        return {"echo": settings.db_echo}

    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": 30,
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_pre_ping": True,  # Verify connections before use
        "echo": settings.db_echo,
        "connect_args": {"connect_timeout": 5},
    }


def create_fresh_async_engine(url: str | None = None) -> AsyncEngine:
    """Create a new async engine without caching it.

    Used by CLI commands and tests that need an engine bound to their own
    event loop.
    """
    url = url or settings.async_url
    if not url:
        raise RuntimeError("DATABASE_URL_APP is required")
    return create_async_engine(url, **_engine_options(url))


def get_async_engine() -> AsyncEngine:
    """
    Return the process-wide async engine, creating it on first use.

    Returns:
        Configured async SQLAlchemy engine
    """
    global _async_engine

    if _async_engine is not None:
        return _async_engine

    _async_engine = create_fresh_async_engine()
    logger.info(
        "Created async database engine",
        extra={"dialect": _async_engine.dialect.name},
    )
    return _async_engine


def get_async_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    Get or create the async sessionmaker.

    Returns:
        Async sessionmaker factory
    """
    global _async_sessionmaker
    if _async_sessionmaker is not None:
        return _async_sessionmaker

    _async_sessionmaker = async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    return _async_sessionmaker


async def reset_async_engine() -> None:
    """Dispose the async engine and forget the sessionmaker.

    Useful for tests to ensure fresh connections on new event loops.
    """
    global _async_engine, _async_sessionmaker

    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_sessionmaker = None


@asynccontextmanager
async def async_session_scope() -> AsyncIterator[AsyncSession]:
    """Async session for code running outside a request (CLI, scripts).

    Commits on success and rolls back on error.

    Usage:
        async with async_session_scope() as db:
            db.add(Category(name="Music", description="Live music events"))
    """
    session_maker = get_async_sessionmaker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
