"""
Role names granted to petclinic users.
"""

from enum import Enum


class Role(str, Enum):
    """Role granted to an API caller."""

    OWNER_ADMIN = "OWNER_ADMIN"
    VET_ADMIN = "VET_ADMIN"
    ADMIN = "ADMIN"

    @classmethod
    def all_names(cls) -> frozenset:
        """Names of every defined role."""
        return frozenset(role.value for role in cls)
