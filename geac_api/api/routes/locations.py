"""
FastAPI routes for the location catalog.
"""

from fastapi import APIRouter

from geac_api.api.schemas.location import LocationResponse
from geac_api.core.dependencies import AsyncDbSession
from geac_api.db.models import Location
from geac_api.repos import location_repo

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get(
    "",
    response_model=list[LocationResponse],
    summary="List all locations",
    description="""
    Retrieve every venue ordered by id, with its flattened address and capacity.

    Address fields are serialized in camelCase (`zipCode`, `referencePoint`).
    """,
)
async def list_locations(db: AsyncDbSession) -> list[Location]:
    """List all locations."""
    return await location_repo.get_all_locations(db)
