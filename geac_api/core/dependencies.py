"""
FastAPI dependency injection utilities.

Provides the per-request database session. Routes declare it through the
``AsyncDbSession`` alias so tests can swap the storage capability with
``app.dependency_overrides[get_async_db_session]``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geac_api.core.db import get_async_sessionmaker


async def get_async_db_session() -> AsyncGenerator[AsyncSession]:
    """
    Async database session dependency for FastAPI endpoints.

    Usage:
        @router.get("/categories")
        async def list_categories(db: AsyncDbSession):
            return await category_repo.get_all_categories(db)

    Yields:
        Async SQLAlchemy database session, closed after the request
    """
    session_maker = get_async_sessionmaker()
    async with session_maker() as session:
        yield session


# Type alias for async database session dependency
AsyncDbSession = Annotated[AsyncSession, Depends(get_async_db_session)]
