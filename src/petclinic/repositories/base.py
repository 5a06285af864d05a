"""
Generic persistence gateway for petclinic entities.

Repositories are stateless: every operation receives the session explicitly,
so one repository instance can serve any number of requests. Transaction
boundaries belong to the caller (see ``SessionManager.get_transaction``).
"""

import logging
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException
from ..models.base import BaseModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Range of the INTEGER identity columns; ids outside it can never be stored
MIN_IDENTITY = -(2**31)
MAX_IDENTITY = 2**31 - 1


def is_storable_identity(entity_id: Any) -> bool:
    """Whether ``entity_id`` fits the identity columns."""
    return isinstance(entity_id, int) and MIN_IDENTITY <= entity_id <= MAX_IDENTITY


class BaseRepository(Generic[ModelT]):
    """
    find/list/save/delete for one entity type.

    Subclasses set ``model`` and may override ``_base_query`` to add eager
    loading options shared by every read.
    """

    model: Type[ModelT]

    @property
    def resource_name(self) -> str:
        return self.model.__name__

    def _base_query(self) -> Select:
        return select(self.model)

    async def get(self, session: AsyncSession, entity_id: Any) -> Optional[ModelT]:
        """Return the entity with ``entity_id`` or ``None``."""
        if not is_storable_identity(entity_id):
            return None
        stmt = self._base_query().where(self.model.id == entity_id)
        result = await session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def find_by_id(self, session: AsyncSession, entity_id: Any) -> ModelT:
        """
        Look up an entity by identity.

        Args:
            session: Active database session
            entity_id: Identity to look up

        Returns:
            The stored entity

        Raises:
            NotFoundException: If no entity has that identity
        """
        entity = await self.get(session, entity_id)
        if entity is None:
            raise NotFoundException(self.resource_name, entity_id)
        return entity

    async def list_all(self, session: AsyncSession) -> Sequence[ModelT]:
        """Return every stored entity ordered by identity."""
        stmt = self._base_query().order_by(self.model.id)
        result = await session.execute(stmt)
        return list(result.unique().scalars().all())

    async def save(self, session: AsyncSession, entity: ModelT) -> ModelT:
        """
        Insert a new entity or merge an existing one.

        Entities without an identity are inserted and receive one on flush.
        Entities with an identity are merged into the session, overwriting the
        stored row; no version check is made.

        Args:
            session: Active database session
            entity: Entity to persist

        Returns:
            The persistent instance (the merged copy for updates)
        """
        if entity.is_new():
            session.add(entity)
            action = "Inserted"
        else:
            entity = await session.merge(entity)
            action = "Updated"

        await session.flush()
        logger.info(f"{action} {self.resource_name} id={entity.id}")
        return entity

    async def delete(self, session: AsyncSession, entity: ModelT) -> None:
        """
        Remove an entity.

        An entity not tracked by ``session`` is merged first so the delete
        always targets a store-known instance.

        Args:
            session: Active database session
            entity: Entity to remove
        """
        if entity not in session:
            entity = await session.merge(entity)
        entity_id = entity.id
        await session.delete(entity)
        await session.flush()
        logger.info(f"Deleted {self.resource_name} id={entity_id}")

    async def find_all_by_ids(
        self, session: AsyncSession, ids: Sequence[Any]
    ) -> List[ModelT]:
        """Return the entities whose identity is in ``ids``, ordered by identity."""
        ids = [entity_id for entity_id in ids if is_storable_identity(entity_id)]
        if not ids:
            return []
        stmt = (
            self._base_query()
            .where(self.model.id.in_(ids))
            .order_by(self.model.id)
        )
        result = await session.execute(stmt)
        return list(result.unique().scalars().all())
