"""
Repository functions for Location data access.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geac_api.db.models import Location

logger = logging.getLogger(__name__)


async def get_all_locations(db: AsyncSession) -> list[Location]:
    """
    Retrieve every stored location, ordered by id.

    Args:
        db: Database session

    Returns:
        List of Location models (empty when there are none)
    """
    result = await db.execute(select(Location).order_by(Location.id))
    locations = list(result.scalars().all())

    logger.info(f"Retrieved {len(locations)} locations", extra={"count": len(locations)})
    return locations
