"""
FastAPI routes for the category catalog.
"""

from fastapi import APIRouter

from geac_api.api.schemas.category import CategoryResponse
from geac_api.core.dependencies import AsyncDbSession
from geac_api.db.models import Category
from geac_api.repos import category_repo

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List all categories",
    description="""
    Retrieve every event category ordered by id.

    Returns an empty array when no categories are stored.
    """,
)
async def list_categories(db: AsyncDbSession) -> list[Category]:
    """List all categories."""
    return await category_repo.get_all_categories(db)
