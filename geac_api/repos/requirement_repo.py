"""
Repository functions for event Requirement data access.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geac_api.db.models import Requirement

logger = logging.getLogger(__name__)


async def get_all_requirements(db: AsyncSession) -> list[Requirement]:
    """Retrieve every stored requirement, ordered by id."""
    result = await db.execute(select(Requirement).order_by(Requirement.id))
    requirements = list(result.scalars().all())

    logger.info(f"Retrieved {len(requirements)} requirements", extra={"count": len(requirements)})
    return requirements
