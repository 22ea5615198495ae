"""
Pydantic response schema for the category list endpoint.
"""

from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    """A category as returned by GET /categories."""

    id: int = Field(..., description="Category identifier", examples=[1])
    name: str = Field(..., description="Category name", examples=["Music"])
    description: str | None = Field(
        default=None,
        description="What kind of events belong to the category",
        examples=["Live music events"],
    )

    model_config = {
        "from_attributes": True,  # Enable ORM mode for SQLAlchemy models
        "json_schema_extra": {
            "examples": [{"id": 1, "name": "Music", "description": "Live music events"}]
        },
    }
