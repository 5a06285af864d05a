"""
Persistence gateway for the petclinic entities.

Each repository wraps find/list/save/delete for one entity type and takes the
database session as an explicit argument on every call.
"""

from .base import BaseRepository
from .owner import OwnerRepository
from .pet import PetRepository, VisitRepository
from .pet_type import CascadeResult, PetTypeRepository
from .user import UserRepository
from .vet import SpecialtyRepository, VetRepository

__all__ = [
    "BaseRepository",
    "CascadeResult",
    "OwnerRepository",
    "PetRepository",
    "PetTypeRepository",
    "SpecialtyRepository",
    "UserRepository",
    "VetRepository",
    "VisitRepository",
]
