"""
Vet model for the petclinic package.

Vets hold any number of specialties through the ``vet_specialties``
association table.
"""

from typing import Any, List

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BaseModel
from .pet_type import Specialty

vet_specialties = Table(
    "vet_specialties",
    Base.metadata,
    Column(
        "vet_id",
        ForeignKey("vets.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "specialty_id",
        ForeignKey("specialties.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Vet(BaseModel):
    """Veterinarian working at the clinic."""

    __tablename__ = "vets"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Vet with an empty specialty set."""
        if "specialties" not in kwargs:
            kwargs["specialties"] = []
        super().__init__(**kwargs)

    first_name: Mapped[str] = mapped_column(String(30), nullable=False)
    last_name: Mapped[str] = mapped_column(String(30), nullable=False, index=True)

    specialties: Mapped[List[Specialty]] = relationship(
        Specialty,
        secondary=vet_specialties,
        back_populates="vets",
        order_by=Specialty.name,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<Vet(id={self.id}, first_name='{self.first_name}', "
            f"last_name='{self.last_name}')>"
        )

    def set_specialties(self, specialties: List[Specialty]) -> None:
        """Replace the vet's specialties, dropping duplicates by id."""
        seen = set()
        unique = []
        for specialty in specialties:
            key = specialty.id if specialty.id is not None else id(specialty)
            if key not in seen:
                seen.add(key)
                unique.append(specialty)
        self.specialties = unique
