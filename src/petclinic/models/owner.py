"""
Owner, Pet and Visit models for the petclinic package.

An owner owns an ordered collection of pets and each pet owns an ordered
collection of visits. Both ownership relationships cascade at the ORM level,
so deleting an owner removes its pets and their visits.
"""

from datetime import date
from typing import Any, List, Optional

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .pet_type import PetType


class Owner(BaseModel):
    """Person owning one or more pets."""

    __tablename__ = "owners"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Owner with an empty pet collection."""
        if "pets" not in kwargs:
            kwargs["pets"] = []
        super().__init__(**kwargs)

    first_name: Mapped[str] = mapped_column(String(30), nullable=False)
    last_name: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(80), nullable=False)
    telephone: Mapped[str] = mapped_column(String(20), nullable=False)

    pets: Mapped[List["Pet"]] = relationship(
        "Pet",
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="Pet.name",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<Owner(id={self.id}, first_name='{self.first_name}', "
            f"last_name='{self.last_name}')>"
        )

    def add_pet(self, pet: "Pet") -> None:
        """Attach a pet to this owner."""
        self.pets.append(pet)


class Pet(BaseModel):
    """Animal owned by an owner, classified by a pet type."""

    __tablename__ = "pets"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Pet with an empty visit collection."""
        if "visits" not in kwargs:
            kwargs["visits"] = []
        super().__init__(**kwargs)

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # No ondelete cascade: PetTypeRepository.delete removes dependents itself
    type_id: Mapped[int] = mapped_column(ForeignKey("types.id"), nullable=False)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("owners.id", ondelete="CASCADE"), nullable=False
    )

    type: Mapped[PetType] = relationship(PetType, lazy="joined")
    owner: Mapped["Owner"] = relationship("Owner", back_populates="pets")
    visits: Mapped[List["Visit"]] = relationship(
        "Visit",
        back_populates="pet",
        cascade="all, delete-orphan",
        order_by="Visit.visit_date",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_pets_type", "type_id"),
        Index("idx_pets_owner_name", "owner_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"

    def add_visit(self, visit: "Visit") -> None:
        """Attach a visit to this pet."""
        self.visits.append(visit)


class Visit(BaseModel):
    """A pet's visit to the clinic."""

    __tablename__ = "visits"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Visit, defaulting the visit date to today."""
        if kwargs.get("visit_date") is None:
            kwargs["visit_date"] = date.today()
        super().__init__(**kwargs)

    visit_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    pet: Mapped["Pet"] = relationship("Pet", back_populates="visits")

    def __repr__(self) -> str:
        return f"<Visit(id={self.id}, date={self.visit_date}, pet_id={self.pet_id})>"
