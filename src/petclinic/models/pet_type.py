"""
PetType and Specialty models for the petclinic package.

Both are simple named lookup entities: a pet type classifies pets
(``cat``, ``dog``...) and a specialty describes a vet's field of expertise.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .vet import Vet


class NamedEntityMixin:
    """Adds the required ``name`` column shared by named lookup entities."""

    name: Mapped[str] = mapped_column(String(80), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id}, name='{self.name}')>"


class PetType(NamedEntityMixin, BaseModel):
    """
    Kind of animal a pet belongs to.

    Pets reference their type by foreign key, but the relationship is not
    configured to cascade: removing a type together with its pets and their
    visits is done explicitly by ``PetTypeRepository.delete``.
    """

    __tablename__ = "types"


class Specialty(NamedEntityMixin, BaseModel):
    """Field of expertise a vet may hold (radiology, surgery...)."""

    __tablename__ = "specialties"

    # Loaded on demand so deleting a specialty also clears vet_specialties rows
    vets: Mapped[List["Vet"]] = relationship(
        "Vet",
        secondary="vet_specialties",
        back_populates="specialties",
    )
