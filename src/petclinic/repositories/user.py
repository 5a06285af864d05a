"""
User repository backing HTTP Basic authentication.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence gateway for API users."""

    model = User

    async def find_by_username(
        self, session: AsyncSession, username: str
    ) -> Optional[User]:
        """Return the user with ``username`` or ``None``."""
        stmt = select(User).where(User.username == username)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
