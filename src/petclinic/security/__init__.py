"""
Authentication and authorization support for the petclinic API.
"""

from .authorization import (
    Caller,
    RolePredicate,
    authorize,
    ensure_authorized,
    has_any_role,
    has_role,
)
from .passwords import hash_password, verify_password
from .roles import Role

__all__ = [
    "Role",
    "Caller",
    "RolePredicate",
    "has_role",
    "has_any_role",
    "authorize",
    "ensure_authorized",
    "hash_password",
    "verify_password",
]
