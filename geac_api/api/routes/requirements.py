"""
FastAPI routes for the event requirement catalog.
"""

from fastapi import APIRouter

from geac_api.api.schemas.requirement import RequirementResponse
from geac_api.core.dependencies import AsyncDbSession
from geac_api.db.models import Requirement
from geac_api.repos import requirement_repo

router = APIRouter(prefix="/requirements", tags=["Requirements"])


@router.get(
    "",
    response_model=list[RequirementResponse],
    summary="List all requirements",
)
async def list_requirements(db: AsyncDbSession) -> list[Requirement]:
    """List all event requirements."""
    return await requirement_repo.get_all_requirements(db)
