"""
Pytest configuration and fixtures for petclinic tests.

This module provides common fixtures and configuration for all tests
in the petclinic package, including database setup, factory classes,
and HTTP clients bound to the application.
"""

from datetime import date
from typing import AsyncGenerator, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from petclinic.api import create_app
from petclinic.database.connection import create_engine
from petclinic.database.session import SessionManager
from petclinic.models import Owner, Pet, PetType, Specialty, User, Vet, Visit
from petclinic.models.base import Base
from petclinic.security import Role, hash_password
from petclinic.utils.config import AppSettings


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an engine on a fresh SQLite file with the schema in place.

    A file database (rather than ``:memory:``) keeps tables visible across
    the separate connections NullPool hands out.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'petclinic_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_manager(
    test_engine: AsyncEngine,
) -> AsyncGenerator[SessionManager, None]:
    """Create a session manager for testing."""
    session_manager = SessionManager(test_engine)
    yield session_manager
    await session_manager.close_all_sessions()


@pytest_asyncio.fixture
async def async_session(
    test_session_manager: SessionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session; uncommitted work is discarded."""
    async with test_session_manager.get_session() as session:
        yield session


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    """Settings for an application whose session manager is injected."""
    return AppSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'petclinic_test.db'}",
        create_schema=False,
        seed_data=False,
    )


@pytest_asyncio.fixture
async def client(
    app_settings: AppSettings, test_session_manager: SessionManager
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client for an application with security disabled."""
    app = create_app(app_settings, test_session_manager)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def secure_client(
    app_settings: AppSettings, test_session_manager: SessionManager
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    HTTP client for an application with HTTP Basic security enabled.

    Three users exist: ``owneradmin`` (OWNER_ADMIN), ``vetadmin`` (VET_ADMIN)
    and ``disabled`` (VET_ADMIN, account disabled); every password is
    ``secret``.
    """
    async with test_session_manager.get_transaction() as session:
        await UserFactory.create(session, username="owneradmin", roles=[Role.OWNER_ADMIN])
        await UserFactory.create(session, username="vetadmin", roles=[Role.VET_ADMIN])
        await UserFactory.create(
            session, username="disabled", roles=[Role.VET_ADMIN], enabled=False
        )

    app_settings.security_enabled = True
    app = create_app(app_settings, test_session_manager)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# Factory classes for creating test entities
class PetTypeFactory:
    """Factory for creating test PetType instances."""

    @staticmethod
    def build(**kwargs) -> PetType:
        """Build a PetType instance without saving to database."""
        defaults = {"name": "cat"}
        defaults.update(kwargs)
        return PetType(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> PetType:
        """Create and save a PetType instance to the database."""
        pet_type = PetTypeFactory.build(**kwargs)
        session.add(pet_type)
        await session.flush()
        return pet_type


class SpecialtyFactory:
    """Factory for creating test Specialty instances."""

    @staticmethod
    def build(**kwargs) -> Specialty:
        defaults = {"name": "radiology"}
        defaults.update(kwargs)
        return Specialty(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> Specialty:
        specialty = SpecialtyFactory.build(**kwargs)
        session.add(specialty)
        await session.flush()
        return specialty


class OwnerFactory:
    """Factory for creating test Owner instances."""

    @staticmethod
    def build(**kwargs) -> Owner:
        """Build an Owner instance without saving to database."""
        defaults = {
            "first_name": "George",
            "last_name": "Franklin",
            "address": "110 W. Liberty St.",
            "city": "Madison",
            "telephone": "6085551023",
        }
        defaults.update(kwargs)
        return Owner(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> Owner:
        """Create and save an Owner instance to the database."""
        owner = OwnerFactory.build(**kwargs)
        session.add(owner)
        await session.flush()
        return owner


class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    def build(pet_type: PetType, **kwargs) -> Pet:
        """Build a Pet instance of ``pet_type`` without saving to database."""
        defaults = {"name": "Leo", "birth_date": date(2010, 9, 7)}
        defaults.update(kwargs)
        return Pet(type=pet_type, **defaults)

    @staticmethod
    async def create(
        session: AsyncSession,
        owner: Optional[Owner] = None,
        pet_type: Optional[PetType] = None,
        **kwargs,
    ) -> Pet:
        """Create and save a Pet, creating an owner and type when not given."""
        if owner is None:
            owner = await OwnerFactory.create(session)
        if pet_type is None:
            pet_type = await PetTypeFactory.create(session)
        pet = PetFactory.build(pet_type, **kwargs)
        owner.add_pet(pet)
        session.add(pet)
        await session.flush()
        return pet


class VisitFactory:
    """Factory for creating test Visit instances."""

    @staticmethod
    async def create(session: AsyncSession, pet: Pet, **kwargs) -> Visit:
        defaults = {"visit_date": date(2013, 1, 1), "description": "rabies shot"}
        defaults.update(kwargs)
        visit = Visit(**defaults)
        pet.add_visit(visit)
        session.add(visit)
        await session.flush()
        return visit


class VetFactory:
    """Factory for creating test Vet instances."""

    @staticmethod
    async def create(
        session: AsyncSession, specialties: Optional[List[Specialty]] = None, **kwargs
    ) -> Vet:
        defaults = {"first_name": "Helen", "last_name": "Leary"}
        defaults.update(kwargs)
        vet = Vet(**defaults)
        vet.set_specialties(specialties or [])
        session.add(vet)
        await session.flush()
        return vet


class UserFactory:
    """Factory for creating test User instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        username: str = "admin",
        password: str = "secret",
        roles: Optional[List[Role]] = None,
        **kwargs,
    ) -> User:
        user = User(username=username, password=hash_password(password), **kwargs)
        for role in roles or []:
            user.add_role(role.value)
        session.add(user)
        await session.flush()
        return user
