"""
Owner repository.

Owner reads join the pet collection into the same query instead of issuing a
second select for it.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..models import Owner
from .base import BaseRepository


class OwnerRepository(BaseRepository[Owner]):
    """Persistence gateway for owners."""

    model = Owner

    def _base_query(self) -> Select:
        return select(Owner).options(joinedload(Owner.pets))

    async def find_by_last_name(
        self, session: AsyncSession, last_name: str
    ) -> Sequence[Owner]:
        """
        Return the distinct owners whose last name starts with ``last_name``.

        Args:
            session: Active database session
            last_name: Prefix to match; ``%`` and ``_`` are matched literally

        Returns:
            Matching owners ordered by identity, possibly empty
        """
        stmt = (
            self._base_query()
            .where(Owner.last_name.startswith(last_name, autoescape=True))
            .order_by(Owner.id)
        )
        result = await session.execute(stmt)
        return list(result.unique().scalars().all())
