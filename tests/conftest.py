"""
Pytest configuration and shared fixtures.

Provides:
- An in-memory SQLite database (aiosqlite) with all tables, per test
- An async session bound to that database
- An httpx AsyncClient wired to the app with the session overridden
- Factory helpers for categories, locations, requirements and users

Async fixtures run through the AnyIO pytest plugin; tests that use them
must be marked with ``@pytest.mark.anyio``.
"""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time, so the environment must be set first.
os.environ.setdefault("DATABASE_URL_APP", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OBSERVABILITY_STRUCTURED_LOGS", "false")

import httpx  # noqa: E402 (import after env setup)
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from geac_api.core.dependencies import get_async_db_session  # noqa: E402
from geac_api.db.models import Base, Category, Location, Requirement, User  # noqa: E402
from geac_api.domain.enums import UserRole  # noqa: E402
from geac_api.main import create_app  # noqa: E402


# =============================================================================
# AnyIO Backend Configuration
# =============================================================================
@pytest.fixture
def anyio_backend():
    return "asyncio"


# ============================================================================
# Async SQLAlchemy Fixtures
# ============================================================================


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Fresh in-memory database for one test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    session_maker = async_sessionmaker(
        bind=async_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(async_db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient]:
    """AsyncClient against a fresh app whose database is `async_db_session`."""
    app = create_app()

    async def override_get_async_db():
        yield async_db_session

    app.dependency_overrides[get_async_db_session] = override_get_async_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ============================================================================
# Async Helper Functions
# ============================================================================


async def _persist(db: AsyncSession, obj: Any) -> Any:
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj


async def acreate_category_in_db(
    db: AsyncSession,
    *,
    name: str = "Music",
    description: str | None = "Live music events",
    **overrides: Any,
) -> Category:
    return await _persist(db, Category(name=name, description=description, **overrides))


async def acreate_location_in_db(
    db: AsyncSession, *, name: str = "Auditorium A", **overrides: Any
) -> Location:
    data: dict[str, Any] = {
        "street": "Av. Adhemar de Barros",
        "number": "s/n",
        "neighborhood": "Ondina",
        "city": "Salvador",
        "state": "BA",
        "zip_code": "40170-110",
        "reference_point": "Next to the library",
        "capacity": 300,
    }
    data.update(overrides)
    return await _persist(db, Location(name=name, **data))


async def acreate_requirement_in_db(
    db: AsyncSession, *, description: str = "Bring your own laptop", **overrides: Any
) -> Requirement:
    return await _persist(db, Requirement(description=description, **overrides))


async def acreate_user_in_db(
    db: AsyncSession,
    *,
    username: str = "alice",
    email: str = "alice@example.com",
    role: UserRole = UserRole.STUDENT,
    **overrides: Any,
) -> User:
    data: dict[str, Any] = {
        "name": username.title(),
        "password_hash": "$2b$12$examplehashexamplehashexamplehashexamplehash",
    }
    data.update(overrides)
    return await _persist(db, User(username=username, email=email, role=role, **data))
