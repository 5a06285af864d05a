"""
Vet and Specialty repositories.
"""

from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Specialty, Vet
from .base import BaseRepository


class VetRepository(BaseRepository[Vet]):
    """Persistence gateway for vets."""

    model = Vet


class SpecialtyRepository(BaseRepository[Specialty]):
    """Persistence gateway for specialties."""

    model = Specialty

    async def find_by_ids(
        self, session: AsyncSession, ids: Sequence[int]
    ) -> List[Specialty]:
        """Resolve specialty references; unknown ids are left out."""
        return await self.find_all_by_ids(session, ids)
