"""
Tests for the persistence gateways.
"""

import pytest
from sqlalchemy import func, select

from petclinic.exceptions import NotFoundException
from petclinic.models import Owner, Pet, PetType, Specialty, Visit, vet_specialties
from petclinic.repositories import (
    CascadeResult,
    OwnerRepository,
    PetRepository,
    PetTypeRepository,
    SpecialtyRepository,
    UserRepository,
    VetRepository,
)
from petclinic.security import Role

from .conftest import (
    OwnerFactory,
    PetFactory,
    PetTypeFactory,
    SpecialtyFactory,
    UserFactory,
    VetFactory,
    VisitFactory,
)


async def count(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestBaseRepository:
    """Test cases for find/list/save/delete."""

    @pytest.mark.asyncio
    async def test_find_by_id(self, async_session):
        stored = await PetTypeFactory.create(async_session, name="dog")

        found = await PetTypeRepository().find_by_id(async_session, stored.id)

        assert found is stored

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, async_session):
        with pytest.raises(NotFoundException) as exc_info:
            await PetTypeRepository().find_by_id(async_session, 999)

        assert exc_info.value.details == {"resource": "PetType", "resource_id": 999}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, async_session):
        assert await SpecialtyRepository().get(async_session, 1) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity_id", [2**31, -(2**31) - 1, 10**20])
    async def test_identity_outside_column_range_is_missing(self, async_session, entity_id):
        await PetTypeFactory.create(async_session)

        assert await PetTypeRepository().get(async_session, entity_id) is None
        with pytest.raises(NotFoundException):
            await PetTypeRepository().find_by_id(async_session, entity_id)

    @pytest.mark.asyncio
    async def test_find_all_by_ids_skips_out_of_range_ids(self, async_session):
        radiology = await SpecialtyFactory.create(async_session, name="radiology")

        found = await SpecialtyRepository().find_by_ids(async_session, [radiology.id, 10**20])

        assert found == [radiology]

    @pytest.mark.asyncio
    async def test_list_all_empty(self, async_session):
        assert await VetRepository().list_all(async_session) == []

    @pytest.mark.asyncio
    async def test_list_all_ordered_by_id(self, async_session):
        repository = PetTypeRepository()
        for name in ("snake", "bird", "cat"):
            await repository.save(async_session, PetType(name=name))

        names = [t.name for t in await repository.list_all(async_session)]

        assert names == ["snake", "bird", "cat"]

    @pytest.mark.asyncio
    async def test_save_new_entity_assigns_identity(self, async_session):
        saved = await SpecialtyRepository().save(async_session, Specialty(name="surgery"))

        assert saved.id is not None
        assert await count(async_session, Specialty) == 1

    @pytest.mark.asyncio
    async def test_save_existing_entity_updates_in_place(self, test_session_manager):
        repository = PetTypeRepository()
        async with test_session_manager.get_transaction() as session:
            stored = await repository.save(session, PetType(name="cat"))

        async with test_session_manager.get_transaction() as session:
            await repository.save(session, PetType(id=stored.id, name="kitten"))

        async with test_session_manager.get_session() as session:
            types = await repository.list_all(session)

        assert [(t.id, t.name) for t in types] == [(stored.id, "kitten")]

    @pytest.mark.asyncio
    async def test_delete_untracked_entity(self, test_session_manager):
        repository = SpecialtyRepository()
        async with test_session_manager.get_transaction() as session:
            stored = await SpecialtyFactory.create(session)

        async with test_session_manager.get_transaction() as session:
            await repository.delete(session, Specialty(id=stored.id, name="radiology"))

        async with test_session_manager.get_session() as session:
            assert await repository.get(session, stored.id) is None

    @pytest.mark.asyncio
    async def test_find_all_by_ids_skips_unknown(self, async_session):
        radiology = await SpecialtyFactory.create(async_session, name="radiology")
        surgery = await SpecialtyFactory.create(async_session, name="surgery")

        found = await SpecialtyRepository().find_by_ids(
            async_session, [surgery.id, 999, radiology.id]
        )

        assert found == [radiology, surgery]
        assert await SpecialtyRepository().find_by_ids(async_session, []) == []


class TestPetTypeRepository:
    """Test cases for the pet type cascade delete."""

    @pytest.mark.asyncio
    async def test_delete_removes_pets_and_visits(self, test_session_manager):
        repository = PetTypeRepository()
        async with test_session_manager.get_transaction() as session:
            owner = await OwnerFactory.create(session)
            cat = await PetTypeFactory.create(session, name="cat")
            dog = await PetTypeFactory.create(session, name="dog")
            leo = await PetFactory.create(session, owner=owner, pet_type=cat, name="Leo")
            max_ = await PetFactory.create(session, owner=owner, pet_type=cat, name="Max")
            rosy = await PetFactory.create(session, owner=owner, pet_type=dog, name="Rosy")
            await VisitFactory.create(session, leo)
            await VisitFactory.create(session, leo, description="neutered")
            await VisitFactory.create(session, max_)
            await VisitFactory.create(session, rosy)

        async with test_session_manager.get_transaction() as session:
            pet_type = await repository.find_by_id(session, cat.id)
            result = await repository.delete(session, pet_type)

        assert result == CascadeResult(pet_type_id=cat.id, pets=2, visits=3)

        async with test_session_manager.get_session() as session:
            with pytest.raises(NotFoundException):
                await repository.find_by_id(session, cat.id)
            with pytest.raises(NotFoundException):
                await PetRepository().find_by_id(session, leo.id)
            assert await PetRepository().get(session, rosy.id) is not None
            assert await count(session, Pet) == 1
            assert await count(session, Visit) == 1

    @pytest.mark.asyncio
    async def test_delete_unused_type(self, async_session):
        pet_type = await PetTypeFactory.create(async_session, name="lizard")

        result = await PetTypeRepository().delete(async_session, pet_type)

        assert result.pets == 0
        assert result.visits == 0
        assert await count(async_session, PetType) == 0

    @pytest.mark.asyncio
    async def test_failed_transaction_keeps_everything(self, test_session_manager):
        repository = PetTypeRepository()
        async with test_session_manager.get_transaction() as session:
            pet = await PetFactory.create(session)
            await VisitFactory.create(session, pet)

        with pytest.raises(RuntimeError):
            async with test_session_manager.get_transaction() as session:
                pet_type = await repository.find_by_id(session, pet.type_id)
                await repository.delete(session, pet_type)
                raise RuntimeError("abort")

        async with test_session_manager.get_session() as session:
            assert await count(session, PetType) == 1
            assert await count(session, Pet) == 1
            assert await count(session, Visit) == 1


class TestOwnerRepository:
    """Test cases for owner reads and deletes."""

    @pytest.mark.asyncio
    async def test_find_by_last_name_prefix(self, async_session):
        await OwnerFactory.create(async_session, first_name="Betty", last_name="Davis")
        await OwnerFactory.create(async_session, first_name="Harold", last_name="Davis")
        await OwnerFactory.create(async_session, first_name="Jean", last_name="Coleman")

        owners = await OwnerRepository().find_by_last_name(async_session, "Dav")

        assert [o.first_name for o in owners] == ["Betty", "Harold"]

    @pytest.mark.asyncio
    async def test_find_by_last_name_no_match(self, async_session):
        await OwnerFactory.create(async_session)

        assert await OwnerRepository().find_by_last_name(async_session, "Zed") == []

    @pytest.mark.asyncio
    async def test_find_by_last_name_matches_wildcards_literally(self, async_session):
        await OwnerFactory.create(async_session, last_name="Franklin")

        assert await OwnerRepository().find_by_last_name(async_session, "F%") == []
        assert await OwnerRepository().find_by_last_name(async_session, "_ranklin") == []

    @pytest.mark.asyncio
    async def test_empty_prefix_matches_everyone(self, async_session):
        await OwnerFactory.create(async_session, last_name="Franklin")
        await OwnerFactory.create(async_session, last_name="Davis")

        assert len(await OwnerRepository().find_by_last_name(async_session, "")) == 2

    @pytest.mark.asyncio
    async def test_owner_with_several_pets_is_returned_once(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            owner = await OwnerFactory.create(session)
            pet_type = await PetTypeFactory.create(session)
            await PetFactory.create(session, owner=owner, pet_type=pet_type, name="Leo")
            await PetFactory.create(session, owner=owner, pet_type=pet_type, name="Basil")

        async with test_session_manager.get_session() as session:
            owners = await OwnerRepository().list_all(session)

        assert len(owners) == 1
        assert [p.name for p in owners[0].pets] == ["Basil", "Leo"]

    @pytest.mark.asyncio
    async def test_delete_owner_removes_pets_and_visits(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            pet = await PetFactory.create(session)
            await VisitFactory.create(session, pet)

        async with test_session_manager.get_transaction() as session:
            repository = OwnerRepository()
            owner = await repository.find_by_id(session, pet.owner_id)
            await repository.delete(session, owner)

        async with test_session_manager.get_session() as session:
            assert await count(session, Owner) == 0
            assert await count(session, Pet) == 0
            assert await count(session, Visit) == 0
            assert await count(session, PetType) == 1


class TestPetRepository:
    """Test cases for pet lookups."""

    @pytest.mark.asyncio
    async def test_list_by_type(self, async_session):
        owner = await OwnerFactory.create(async_session)
        cat = await PetTypeFactory.create(async_session, name="cat")
        dog = await PetTypeFactory.create(async_session, name="dog")
        max_ = await PetFactory.create(async_session, owner=owner, pet_type=cat, name="Max")
        await PetFactory.create(async_session, owner=owner, pet_type=dog, name="Rosy")
        leo = await PetFactory.create(async_session, owner=owner, pet_type=cat, name="Leo")

        pets = await PetRepository().list_by_type(async_session, cat.id)

        assert pets == [max_, leo]

    @pytest.mark.asyncio
    async def test_visits_are_ordered_by_date(self, test_session_manager):
        from datetime import date

        async with test_session_manager.get_transaction() as session:
            pet = await PetFactory.create(session)
            await VisitFactory.create(session, pet, visit_date=date(2013, 1, 4))
            await VisitFactory.create(session, pet, visit_date=date(2013, 1, 1))

        async with test_session_manager.get_session() as session:
            stored = await PetRepository().find_by_id(session, pet.id)

        assert [v.visit_date for v in stored.visits] == [date(2013, 1, 1), date(2013, 1, 4)]


class TestVetRepositories:
    """Test cases for vets and specialties."""

    @pytest.mark.asyncio
    async def test_vet_specialties_persist(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            radiology = await SpecialtyFactory.create(session, name="radiology")
            surgery = await SpecialtyFactory.create(session, name="surgery")
            vet = await VetFactory.create(session, specialties=[surgery, radiology])

        async with test_session_manager.get_session() as session:
            stored = await VetRepository().find_by_id(session, vet.id)

        assert [s.name for s in stored.specialties] == ["radiology", "surgery"]

    @pytest.mark.asyncio
    async def test_delete_specialty_clears_vet_association(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            radiology = await SpecialtyFactory.create(session, name="radiology")
            vet = await VetFactory.create(session, specialties=[radiology])

        async with test_session_manager.get_transaction() as session:
            repository = SpecialtyRepository()
            await repository.delete(session, await repository.find_by_id(session, radiology.id))

        async with test_session_manager.get_session() as session:
            stored = await VetRepository().find_by_id(session, vet.id)
            links = await session.scalar(select(func.count()).select_from(vet_specialties))

        assert stored.specialties == []
        assert links == 0


class TestUserRepository:
    """Test cases for user lookup."""

    @pytest.mark.asyncio
    async def test_find_by_username(self, async_session):
        await UserFactory.create(async_session, username="vetadmin", roles=[Role.VET_ADMIN])

        user = await UserRepository().find_by_username(async_session, "vetadmin")

        assert user is not None
        assert user.role_names == {"VET_ADMIN"}
        assert await UserRepository().find_by_username(async_session, "nobody") is None
