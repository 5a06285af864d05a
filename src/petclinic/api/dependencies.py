"""
FastAPI dependencies: request-scoped session, caller resolution and role guards.

A request's dependencies are resolved before its endpoint body runs, so a role
guard denies the call before validation or any persistence call happens.
"""

import logging
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import SessionManager
from ..exceptions import AuthenticationException, DatabaseException
from ..repositories import UserRepository
from ..security import Caller, RolePredicate, ensure_authorized, verify_password
from ..utils.config import AppSettings

logger = logging.getLogger(__name__)

http_basic = HTTPBasic(auto_error=False, realm="petclinic")

_user_repository = UserRepository()


def get_settings(request: Request) -> AppSettings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_session_manager(request: Request) -> SessionManager:
    """
    Session manager owned by the application.

    Raises:
        DatabaseException: If the application has not been started
    """
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None:
        raise DatabaseException(
            "Database not initialized", error_code="DATABASE_NOT_INITIALIZED"
        )
    return manager


async def get_db_session(
    manager: SessionManager = Depends(get_session_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request, closed when the request ends.

    Handlers commit their writes explicitly with ``atomic``; anything left
    uncommitted is rolled back when the session closes.
    """
    async with manager.get_session() as session:
        yield session


async def get_caller(
    settings: AppSettings = Depends(get_settings),
    credentials: Optional[HTTPBasicCredentials] = Depends(http_basic),
    session: AsyncSession = Depends(get_db_session),
) -> Caller:
    """
    Resolve the caller of the current request.

    With security disabled every caller holds all roles. Otherwise HTTP Basic
    credentials are checked against the ``users`` table.

    Raises:
        AuthenticationException: If credentials are missing or wrong
    """
    if not settings.security_enabled:
        return Caller.anonymous_superuser()

    if credentials is None:
        raise AuthenticationException()

    user = await _user_repository.find_by_username(session, credentials.username)
    if (
        user is None
        or not user.enabled
        or not verify_password(credentials.password, user.password)
    ):
        logger.warning(f"Authentication failed for user '{credentials.username}'")
        raise AuthenticationException("Invalid username or password")

    return Caller(username=user.username, roles=frozenset(user.role_names))


def require(predicate: RolePredicate) -> Callable:
    """
    Build a dependency that enforces ``predicate`` on the caller.

    Example:
        @router.post("", dependencies=[Depends(require(has_role(Role.VET_ADMIN)))])
    """

    async def guard(caller: Caller = Depends(get_caller)) -> Caller:
        return ensure_authorized(caller, predicate)

    return guard
