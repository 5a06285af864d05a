"""
Pet type endpoints under ``/api/pettypes``.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import PetType
from ...repositories import PetTypeRepository
from ...schemas import PetTypeFields, PetTypeResponse
from ...security import Role, has_any_role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler

router = APIRouter(prefix="/api/pettypes", tags=["pettypes"])

can_read = Depends(require(has_any_role(Role.OWNER_ADMIN, Role.VET_ADMIN)))
can_write = Depends(require(has_role(Role.VET_ADMIN)))


async def build_pet_type(session: AsyncSession, fields: PetTypeFields) -> PetType:
    return PetType(name=fields.name)


async def apply_pet_type(
    session: AsyncSession, pet_type: PetType, fields: PetTypeFields
) -> None:
    pet_type.name = fields.name


handler = ResourceHandler(
    PetTypeRepository(),
    PetTypeFields,
    PetTypeResponse,
    build=build_pet_type,
    apply=apply_pet_type,
    location=router.prefix,
)


@router.get("", response_model=List[PetTypeResponse], dependencies=[can_read])
async def list_pet_types(session: AsyncSession = Depends(get_db_session)):
    return await handler.list_all(session)


@router.get(
    "/{pet_type_id}", response_model=PetTypeResponse, dependencies=[can_read]
)
async def get_pet_type(
    pet_type_id: int, session: AsyncSession = Depends(get_db_session)
):
    return await handler.retrieve(session, pet_type_id)


@router.post(
    "",
    response_model=PetTypeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[can_write],
)
async def add_pet_type(
    payload: Any = Body(None), session: AsyncSession = Depends(get_db_session)
):
    return await handler.create(session, payload)


@router.put(
    "/{pet_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[can_write],
)
async def update_pet_type(
    pet_type_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, pet_type_id, payload)


@router.delete(
    "/{pet_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[can_write],
)
async def delete_pet_type(
    pet_type_id: int, session: AsyncSession = Depends(get_db_session)
):
    """Delete a pet type along with every pet of that type and their visits."""
    return await handler.delete(session, pet_type_id)
