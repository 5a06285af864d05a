"""
Authorization stage for the petclinic API.

Every route declares a ``RolePredicate``; the predicate is evaluated against the
caller's role set before the route body runs, so a denied call never reaches
validation, lookup or persistence.

Example:
    >>> predicate = has_any_role(Role.OWNER_ADMIN, Role.VET_ADMIN)
    >>> authorize({"VET_ADMIN"}, predicate)
    True
    >>> authorize({"OWNER_ADMIN"}, has_role(Role.VET_ADMIN))
    False
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..exceptions import AuthorizationException
from .roles import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Identity and role set of the party making a request."""

    username: Optional[str]
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def anonymous_superuser(cls) -> "Caller":
        """Caller used when security is disabled: holds every role."""
        return cls(username=None, roles=Role.all_names())


@dataclass(frozen=True)
class RolePredicate:
    """
    Boolean rule over a caller's roles.

    Attributes:
        roles: Roles named by the rule
        require_all: When true every role is needed, otherwise any one suffices
    """

    roles: FrozenSet[str]
    require_all: bool = False

    def evaluate(self, caller_roles: Iterable[str]) -> bool:
        granted = set(caller_roles)
        if self.require_all:
            return self.roles.issubset(granted)
        return bool(self.roles & granted)

    def describe(self) -> str:
        names = ", ".join(sorted(self.roles))
        if self.require_all or len(self.roles) == 1:
            return f"hasRole({names})"
        return f"hasAnyRole({names})"


def has_role(role: Role) -> RolePredicate:
    """Predicate satisfied by callers holding ``role``."""
    return RolePredicate(roles=frozenset({role.value}), require_all=True)


def has_any_role(*roles: Role) -> RolePredicate:
    """Predicate satisfied by callers holding at least one of ``roles``."""
    if not roles:
        raise ValueError("has_any_role requires at least one role")
    return RolePredicate(roles=frozenset(role.value for role in roles))


def authorize(caller_roles: Iterable[str], predicate: RolePredicate) -> bool:
    """
    Evaluate a role predicate.

    Args:
        caller_roles: Roles held by the caller
        predicate: Rule attached to the route

    Returns:
        True to allow, False to deny
    """
    return predicate.evaluate(caller_roles)


def ensure_authorized(caller: Caller, predicate: RolePredicate) -> Caller:
    """
    Allow the call or raise.

    Args:
        caller: Resolved caller
        predicate: Rule attached to the route

    Returns:
        The caller, when allowed

    Raises:
        AuthorizationException: If the predicate denies the caller
    """
    if authorize(caller.roles, predicate):
        return caller

    logger.warning(
        f"Access denied for {caller.username or 'anonymous'}: "
        f"{predicate.describe()} not satisfied by {sorted(caller.roles)}"
    )
    raise AuthorizationException(
        required_roles=sorted(predicate.roles),
        caller=caller.username,
    )
