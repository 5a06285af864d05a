"""
Pet endpoints under ``/api/pets``.

New pets are created through their owner (``POST /api/owners/{id}/pets``).
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Pet, PetType
from ...repositories import PetRepository, PetTypeRepository
from ...schemas import PetFields, PetResponse
from ...security import Role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler, reject_reference

router = APIRouter(prefix="/api/pets", tags=["pets"])

owner_admin = Depends(require(has_role(Role.OWNER_ADMIN)))

pet_type_repository = PetTypeRepository()


async def resolve_pet_type(session: AsyncSession, fields: PetFields) -> PetType:
    """
    Look up the pet type referenced by a pet payload.

    Raises:
        ValidationException: If no pet type has the referenced id
    """
    pet_type = await pet_type_repository.get(session, fields.type.id)
    if pet_type is None:
        raise reject_reference(
            "type", f"unknown pet type id: {fields.type.id}", fields.to_json_dict()
        )
    return pet_type


async def apply_pet(session: AsyncSession, pet: Pet, fields: PetFields) -> None:
    pet.type = await resolve_pet_type(session, fields)
    pet.name = fields.name
    pet.birth_date = fields.birth_date


handler = ResourceHandler(
    PetRepository(),
    PetFields,
    PetResponse,
    apply=apply_pet,
    location=router.prefix,
)


@router.get("", response_model=List[PetResponse], dependencies=[owner_admin])
async def list_pets(session: AsyncSession = Depends(get_db_session)):
    return await handler.list_all(session)


@router.get("/{pet_id}", response_model=PetResponse, dependencies=[owner_admin])
async def get_pet(pet_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.retrieve(session, pet_id)


@router.put(
    "/{pet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[owner_admin]
)
async def update_pet(
    pet_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, pet_id, payload)


@router.delete(
    "/{pet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[owner_admin]
)
async def delete_pet(pet_id: int, session: AsyncSession = Depends(get_db_session)):
    """Delete a pet and its visits."""
    return await handler.delete(session, pet_id)
