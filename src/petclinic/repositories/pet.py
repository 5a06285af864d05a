"""
Pet and Visit repositories.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Pet, Visit
from .base import BaseRepository


class PetRepository(BaseRepository[Pet]):
    """Persistence gateway for pets."""

    model = Pet

    async def list_by_type(self, session: AsyncSession, type_id: int) -> Sequence[Pet]:
        """Return every pet of the given type, ordered by identity."""
        stmt = select(Pet).where(Pet.type_id == type_id).order_by(Pet.id)
        result = await session.execute(stmt)
        return list(result.unique().scalars().all())


class VisitRepository(BaseRepository[Visit]):
    """Persistence gateway for visits."""

    model = Visit
