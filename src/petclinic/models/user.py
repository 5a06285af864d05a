"""
User model for the petclinic package.

Users back HTTP Basic authentication when security is enabled. Each user
carries a set of role grants (``OWNER_ADMIN``, ``VET_ADMIN``, ``ADMIN``)
that the authorization stage evaluates per route.
"""

from typing import Any, List, Set

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class User(BaseModel):
    """API user with a hashed password and role grants."""

    __tablename__ = "users"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize User, enabled by default and without roles."""
        if "enabled" not in kwargs:
            kwargs["enabled"] = True
        if "roles" not in kwargs:
            kwargs["roles"] = []
        super().__init__(**kwargs)

    username: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    roles: Mapped[List["UserRole"]] = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

    @property
    def role_names(self) -> Set[str]:
        """Names of the roles granted to the user."""
        return {grant.role for grant in self.roles}

    def add_role(self, role: str) -> None:
        """Grant a role, ignoring duplicates."""
        if role not in self.role_names:
            self.roles.append(UserRole(role=role))


class UserRole(BaseModel):
    """Single role grant for a user."""

    __tablename__ = "roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="roles")

    __table_args__ = (UniqueConstraint("user_id", "role", name="uni_user_role"),)

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role='{self.role}')>"
