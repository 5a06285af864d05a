"""
Pydantic schemas for data validation and serialization.

This module contains the payload schemas checked by the validation stage
and the response schemas used to shape API output.
"""

from .common import ApiSchema, EntityReference
from .owner import (
    OwnerFields,
    OwnerResponse,
    PetFields,
    PetResponse,
    VisitFields,
    VisitResponse,
)
from .pet_type import (
    NamedEntityFields,
    PetTypeFields,
    PetTypeResponse,
    SpecialtyFields,
    SpecialtyResponse,
)
from .vet import VetFields, VetResponse

__all__ = [
    "ApiSchema",
    "EntityReference",
    # Pet type and specialty schemas
    "NamedEntityFields",
    "PetTypeFields",
    "PetTypeResponse",
    "SpecialtyFields",
    "SpecialtyResponse",
    # Owner, pet and visit schemas
    "OwnerFields",
    "OwnerResponse",
    "PetFields",
    "PetResponse",
    "VisitFields",
    "VisitResponse",
    # Vet schemas
    "VetFields",
    "VetResponse",
]
