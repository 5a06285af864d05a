"""
Owner, Pet and Visit Pydantic schemas for API validation and serialization.

This module contains the payload schemas validated by the write endpoints
and the response schemas used to render owners with their pets and visits.
"""

import datetime as dt
from typing import List, Optional

from pydantic import Field, field_validator

from ..utils.validation import require_not_blank, validate_telephone
from .common import ApiSchema, EntityReference
from .pet_type import PetTypeResponse


def _not_blank(v):
    if v is None or isinstance(v, str):
        return require_not_blank(v)
    return v


class OwnerFields(ApiSchema):
    """Payload for ``POST``/``PUT /api/owners``."""

    first_name: str = Field(..., max_length=30, description="Owner's first name")
    last_name: str = Field(..., max_length=30, description="Owner's last name")
    address: str = Field(..., max_length=255, description="Street address")
    city: str = Field(..., max_length=80, description="City")
    telephone: str = Field(..., description="Telephone number, digits only")

    @field_validator("first_name", "last_name", "address", "city", mode="before")
    @classmethod
    def validate_required_text(cls, v):
        """Validate required string fields."""
        return _not_blank(v)

    @field_validator("telephone", mode="before")
    @classmethod
    def validate_telephone_number(cls, v):
        """Validate telephone: 1 to 10 digits."""
        if v is None or isinstance(v, str):
            return validate_telephone(v)
        return v


class PetFields(ApiSchema):
    """Payload for adding a pet to an owner or updating a pet."""

    name: str = Field(..., max_length=30, description="Pet's name")
    birth_date: Optional[dt.date] = Field(None, description="Pet's birth date")
    type: EntityReference = Field(..., description="Reference to the pet's type")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        """Validate pet name."""
        return _not_blank(v)

    @field_validator("birth_date")
    @classmethod
    def validate_birth_date(cls, v: Optional[dt.date]) -> Optional[dt.date]:
        """Birth dates cannot lie in the future."""
        if v is not None and v > dt.date.today():
            raise ValueError("must be a date in the past or in the present")
        return v


class VisitFields(ApiSchema):
    """Payload for adding a visit to a pet or updating a visit."""

    visit_date: Optional[dt.date] = Field(
        None, alias="date", description="Date of the visit, defaults to today"
    )
    description: str = Field(..., max_length=255, description="Reason for the visit")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v):
        """Validate visit description."""
        return _not_blank(v)


class VisitResponse(ApiSchema):
    """Visit as returned by the API."""

    id: int
    visit_date: dt.date = Field(..., alias="date")
    description: str
    pet_id: int


class PetResponse(ApiSchema):
    """Pet as returned by the API, including its type and visits."""

    id: int
    name: str
    birth_date: Optional[dt.date] = None
    type: PetTypeResponse
    owner_id: int
    visits: List[VisitResponse] = Field(default_factory=list)


class OwnerResponse(ApiSchema):
    """Owner as returned by the API, including pets."""

    id: int
    first_name: str
    last_name: str
    address: str
    city: str
    telephone: str
    pets: List[PetResponse] = Field(default_factory=list)
