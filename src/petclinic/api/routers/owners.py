"""
Owner endpoints under ``/api/owners``, including the nested routes that add
pets to an owner and visits to an owner's pet.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import atomic
from ...exceptions import NotFoundException
from ...models import Owner, Pet, Visit
from ...repositories import OwnerRepository, PetRepository, VisitRepository
from ...schemas import (
    OwnerFields,
    OwnerResponse,
    PetFields,
    PetResponse,
    VisitFields,
    VisitResponse,
)
from ...security import Role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler, render, render_collection, validate
from .pets import resolve_pet_type

router = APIRouter(prefix="/api/owners", tags=["owners"])

owner_admin = Depends(require(has_role(Role.OWNER_ADMIN)))

owner_repository = OwnerRepository()
pet_repository = PetRepository()
visit_repository = VisitRepository()


async def build_owner(session: AsyncSession, fields: OwnerFields) -> Owner:
    return Owner(**fields.model_dump())


async def apply_owner(session: AsyncSession, owner: Owner, fields: OwnerFields) -> None:
    owner.update_fields(**fields.model_dump())


handler = ResourceHandler(
    owner_repository,
    OwnerFields,
    OwnerResponse,
    build=build_owner,
    apply=apply_owner,
    location=router.prefix,
)


def find_owned_pet(owner: Owner, pet_id: int) -> Pet:
    """
    Return the owner's pet with ``pet_id``.

    Raises:
        NotFoundException: If the owner has no such pet
    """
    for pet in owner.pets:
        if pet.id == pet_id:
            return pet
    raise NotFoundException("Pet", pet_id)


@router.get("", response_model=List[OwnerResponse], dependencies=[owner_admin])
async def list_owners(
    last_name: Optional[str] = Query(
        None, alias="lastName", description="Match owners whose last name starts with this"
    ),
    session: AsyncSession = Depends(get_db_session),
):
    if last_name is None:
        return await handler.list_all(session)
    owners = await owner_repository.find_by_last_name(session, last_name)
    return render_collection(OwnerResponse, owners, "Owner")


@router.get("/{owner_id}", response_model=OwnerResponse, dependencies=[owner_admin])
async def get_owner(owner_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.retrieve(session, owner_id)


@router.post(
    "",
    response_model=OwnerResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[owner_admin],
)
async def add_owner(
    payload: Any = Body(None), session: AsyncSession = Depends(get_db_session)
):
    return await handler.create(session, payload)


@router.put(
    "/{owner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[owner_admin],
)
async def update_owner(
    owner_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, owner_id, payload)


@router.delete(
    "/{owner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[owner_admin],
)
async def delete_owner(owner_id: int, session: AsyncSession = Depends(get_db_session)):
    """Delete an owner along with their pets and the pets' visits."""
    return await handler.delete(session, owner_id)


@router.post(
    "/{owner_id}/pets",
    response_model=PetResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[owner_admin],
)
async def add_pet_to_owner(
    owner_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    fields = validate(PetFields, payload)
    async with atomic(session):
        owner = await owner_repository.find_by_id(session, owner_id)
        pet = Pet(
            name=fields.name,
            birth_date=fields.birth_date,
            type=await resolve_pet_type(session, fields),
        )
        owner.add_pet(pet)
        pet = await pet_repository.save(session, pet)
        body = render(PetResponse, pet)

    return JSONResponse(
        body,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/pets/{pet.id}"},
    )


@router.get(
    "/{owner_id}/pets/{pet_id}",
    response_model=PetResponse,
    dependencies=[owner_admin],
)
async def get_owner_pet(
    owner_id: int, pet_id: int, session: AsyncSession = Depends(get_db_session)
):
    owner = await owner_repository.find_by_id(session, owner_id)
    return JSONResponse(render(PetResponse, find_owned_pet(owner, pet_id)))


@router.post(
    "/{owner_id}/pets/{pet_id}/visits",
    response_model=VisitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[owner_admin],
)
async def add_visit_to_pet(
    owner_id: int,
    pet_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    fields = validate(VisitFields, payload)
    async with atomic(session):
        owner = await owner_repository.find_by_id(session, owner_id)
        pet = find_owned_pet(owner, pet_id)
        visit = Visit(visit_date=fields.visit_date, description=fields.description)
        pet.add_visit(visit)
        visit = await visit_repository.save(session, visit)
        body = render(VisitResponse, visit)

    return JSONResponse(
        body,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/visits/{visit.id}"},
    )
