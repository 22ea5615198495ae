"""
Repository functions for Category data access.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geac_api.db.models import Category

logger = logging.getLogger(__name__)


async def get_all_categories(db: AsyncSession) -> list[Category]:
    """
    Retrieve every stored category, ordered by id.

    Args:
        db: Database session

    Returns:
        List of Category models (empty when there are none)
    """
    result = await db.execute(select(Category).order_by(Category.id))
    categories = list(result.scalars().all())

    logger.info(f"Retrieved {len(categories)} categories", extra={"count": len(categories)})
    return categories
