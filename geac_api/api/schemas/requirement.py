"""
Pydantic response schema for the requirement list endpoint.
"""

from pydantic import BaseModel, Field


class RequirementResponse(BaseModel):
    """A requirement as returned by GET /requirements."""

    id: int = Field(..., description="Requirement identifier", examples=[1])
    description: str = Field(
        ...,
        description="What participants need for the event",
        examples=["Bring your own laptop"],
    )

    model_config = {"from_attributes": True}
