"""
PetType and Specialty Pydantic schemas.

Both resources share one payload shape: a single required, non-blank
``name`` of at most 80 characters.
"""

from pydantic import Field, field_validator

from ..utils.validation import require_not_blank
from .common import ApiSchema


class NamedEntityFields(ApiSchema):
    """Payload for creating or renaming a named lookup entity."""

    name: str = Field(..., max_length=80, description="Display name")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        """Reject blank names before type and length checks."""
        if v is None or isinstance(v, str):
            return require_not_blank(v)
        return v


class PetTypeFields(NamedEntityFields):
    """Payload for ``POST``/``PUT /api/pettypes``."""


class SpecialtyFields(NamedEntityFields):
    """Payload for ``POST``/``PUT /api/specialties``."""


class PetTypeResponse(ApiSchema):
    """Pet type as returned by the API."""

    id: int = Field(..., description="Pet type identifier")
    name: str = Field(..., description="Pet type name")


class SpecialtyResponse(ApiSchema):
    """Specialty as returned by the API."""

    id: int = Field(..., description="Specialty identifier")
    name: str = Field(..., description="Specialty name")
