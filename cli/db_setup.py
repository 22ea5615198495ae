"""
Database setup command.

Creates the catalog tables on the database named by DATABASE_URL_APP and
optionally loads a small reference dataset.

Usage:
    db-init            # Create missing tables
    db-init --seed     # Create tables and insert reference rows when empty
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import func, select

from geac_api.core.config import settings
from geac_api.core.db import async_session_scope, get_async_engine, reset_async_engine
from geac_api.core.observability import configure_structured_logging
from geac_api.db.models import Base, Category, Location, Requirement

logger = logging.getLogger(__name__)

SEED_CATEGORIES = [
    ("Palestra", "Talks and lectures"),
    ("Workshop", "Hands-on practical sessions"),
    ("Music", "Live music events"),
]

SEED_LOCATIONS = [
    {
        "name": "Auditorium A",
        "street": "Av. Adhemar de Barros",
        "number": "s/n",
        "neighborhood": "Ondina",
        "city": "Salvador",
        "state": "BA",
        "zip_code": "40170-110",
        "reference_point": "Next to the library",
        "capacity": 300,
    },
    {
        "name": "Lab 2",
        "street": "Rua Barão de Jeremoabo",
        "number": "147",
        "neighborhood": "Federação",
        "city": "Salvador",
        "state": "BA",
        "zip_code": "40170-115",
        "reference_point": "Computer science building",
        "capacity": 40,
    },
]

SEED_REQUIREMENTS = [
    "Bring your own laptop",
    "Prior registration required",
]


async def create_tables() -> None:
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


async def seed_reference_data() -> None:
    """Insert the reference rows, skipping any table that already has data."""
    async with async_session_scope() as db:
        if not await db.scalar(select(func.count()).select_from(Category)):
            db.add_all(Category(name=n, description=d) for n, d in SEED_CATEGORIES)
        if not await db.scalar(select(func.count()).select_from(Location)):
            db.add_all(Location(**row) for row in SEED_LOCATIONS)
        if not await db.scalar(select(func.count()).select_from(Requirement)):
            db.add_all(Requirement(description=d) for d in SEED_REQUIREMENTS)
    logger.info("Reference data seeded")


async def _init(seed: bool) -> None:
    try:
        await create_tables()
        if seed:
            await seed_reference_data()
    finally:
        await reset_async_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the GEAC catalog tables.")
    parser.add_argument("--seed", action="store_true", help="Insert reference data")
    args = parser.parse_args()

    configure_structured_logging(settings.app_log_level)
    asyncio.run(_init(args.seed))
