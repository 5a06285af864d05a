"""
Specialty endpoints under ``/api/specialties``.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Specialty
from ...repositories import SpecialtyRepository
from ...schemas import SpecialtyFields, SpecialtyResponse
from ...security import Role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler

router = APIRouter(prefix="/api/specialties", tags=["specialties"])

vet_admin = Depends(require(has_role(Role.VET_ADMIN)))


async def build_specialty(session: AsyncSession, fields: SpecialtyFields) -> Specialty:
    return Specialty(name=fields.name)


async def apply_specialty(
    session: AsyncSession, specialty: Specialty, fields: SpecialtyFields
) -> None:
    specialty.name = fields.name


handler = ResourceHandler(
    SpecialtyRepository(),
    SpecialtyFields,
    SpecialtyResponse,
    build=build_specialty,
    apply=apply_specialty,
    location=router.prefix,
)


@router.get("", response_model=List[SpecialtyResponse], dependencies=[vet_admin])
async def list_specialties(session: AsyncSession = Depends(get_db_session)):
    return await handler.list_all(session)


@router.get(
    "/{specialty_id}", response_model=SpecialtyResponse, dependencies=[vet_admin]
)
async def get_specialty(
    specialty_id: int, session: AsyncSession = Depends(get_db_session)
):
    return await handler.retrieve(session, specialty_id)


@router.post(
    "",
    response_model=SpecialtyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[vet_admin],
)
async def add_specialty(
    payload: Any = Body(None), session: AsyncSession = Depends(get_db_session)
):
    return await handler.create(session, payload)


@router.put(
    "/{specialty_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[vet_admin],
)
async def update_specialty(
    specialty_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, specialty_id, payload)


@router.delete(
    "/{specialty_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[vet_admin],
)
async def delete_specialty(
    specialty_id: int, session: AsyncSession = Depends(get_db_session)
):
    return await handler.delete(session, specialty_id)
