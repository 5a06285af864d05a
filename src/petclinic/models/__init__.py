"""
Database models for the petclinic package.

This module contains SQLAlchemy models for all entities of the clinic.
"""

# Base model will be imported by all other models
from .base import Base, BaseModel
from .owner import Owner, Pet, Visit
from .pet_type import PetType, Specialty
from .user import User, UserRole
from .vet import Vet, vet_specialties

__all__ = [
    "Base",
    "BaseModel",
    "PetType",
    "Specialty",
    "Owner",
    "Pet",
    "Visit",
    "Vet",
    "vet_specialties",
    "User",
    "UserRole",
]
