"""
Vet Pydantic schemas for API validation and serialization.
"""

from typing import List

from pydantic import Field, field_validator

from ..utils.validation import require_not_blank
from .common import ApiSchema, EntityReference
from .pet_type import SpecialtyResponse


class VetFields(ApiSchema):
    """Payload for ``POST``/``PUT /api/vets``."""

    first_name: str = Field(..., max_length=30, description="Vet's first name")
    last_name: str = Field(..., max_length=30, description="Vet's last name")
    specialties: List[EntityReference] = Field(
        default_factory=list, description="Specialties held, referenced by id"
    )

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def validate_names(cls, v):
        """Validate required name fields."""
        if v is None or isinstance(v, str):
            return require_not_blank(v)
        return v


class VetResponse(ApiSchema):
    """Vet as returned by the API."""

    id: int
    first_name: str
    last_name: str
    specialties: List[SpecialtyResponse] = Field(default_factory=list)
