"""
Pydantic response schema for the location list endpoint.

Attributes are snake_case in Python and serialized in camelCase, which is
the shape the web client consumes.
"""

from pydantic import BaseModel, Field


class LocationResponse(BaseModel):
    """A location as returned by GET /locations."""

    id: int = Field(..., description="Location identifier", examples=[1])
    name: str = Field(..., description="Venue name", examples=["Auditorium A"])
    street: str | None = Field(default=None, examples=["Av. Adhemar de Barros"])
    number: str | None = Field(default=None, examples=["s/n"])
    neighborhood: str | None = Field(default=None, examples=["Ondina"])
    city: str | None = Field(default=None, examples=["Salvador"])
    state: str | None = Field(default=None, examples=["BA"])
    zip_code: str | None = Field(
        default=None, serialization_alias="zipCode", examples=["40170-110"]
    )
    reference_point: str | None = Field(
        default=None,
        serialization_alias="referencePoint",
        description="Landmark that helps visitors find the venue",
        examples=["Next to the library"],
    )
    capacity: int | None = Field(default=None, description="Seat count", examples=[300])

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "name": "Auditorium A",
                    "street": "Av. Adhemar de Barros",
                    "number": "s/n",
                    "neighborhood": "Ondina",
                    "city": "Salvador",
                    "state": "BA",
                    "zipCode": "40170-110",
                    "referencePoint": "Next to the library",
                    "capacity": 300,
                }
            ]
        },
    }
