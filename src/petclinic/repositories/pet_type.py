"""
PetType repository with the explicit pet/visit cascade on delete.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Pet, PetType, Visit
from .base import BaseRepository
from .pet import PetRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    """Counts of rows removed by a pet type delete."""

    pet_type_id: int
    pets: int
    visits: int


class PetTypeRepository(BaseRepository[PetType]):
    """Persistence gateway for pet types."""

    model = PetType

    def __init__(self, pet_repository: Optional[PetRepository] = None):
        self.pet_repository = pet_repository or PetRepository()

    async def delete(self, session: AsyncSession, entity: PetType) -> CascadeResult:
        """
        Delete a pet type together with its pets and their visits.

        The pets table does not cascade on the type foreign key, so dependents
        are removed children first: each pet's visits, then the pet, then the
        type. All statements run in the caller's transaction.

        Args:
            session: Active database session inside a transaction
            entity: Pet type to remove

        Returns:
            CascadeResult with the number of pets and visits removed
        """
        if entity not in session:
            entity = await session.merge(entity)
        pet_type_id = entity.id

        pets = await self.pet_repository.list_by_type(session, pet_type_id)
        visit_count = 0
        for pet in pets:
            result = await session.execute(delete(Visit).where(Visit.pet_id == pet.id))
            visit_count += result.rowcount or 0
            await session.execute(delete(Pet).where(Pet.id == pet.id))

        await session.delete(entity)
        await session.flush()

        logger.info(
            f"Deleted PetType id={pet_type_id} with {len(pets)} pets "
            f"and {visit_count} visits"
        )
        return CascadeResult(
            pet_type_id=pet_type_id, pets=len(pets), visits=visit_count
        )
