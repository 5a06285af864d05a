"""
Vet endpoints under ``/api/vets``.

Specialties are referenced by id in payloads and resolved against the stored
specialties; an unknown id rejects the payload.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Vet
from ...repositories import SpecialtyRepository, VetRepository
from ...schemas import VetFields, VetResponse
from ...security import Role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler, reject_reference

router = APIRouter(prefix="/api/vets", tags=["vets"])

vet_admin = Depends(require(has_role(Role.VET_ADMIN)))

specialty_repository = SpecialtyRepository()


async def apply_vet(session: AsyncSession, vet: Vet, fields: VetFields) -> None:
    ids = [reference.id for reference in fields.specialties]
    specialties = await specialty_repository.find_by_ids(session, ids)
    missing = sorted(set(ids) - {specialty.id for specialty in specialties})
    if missing:
        raise reject_reference(
            "specialties",
            f"unknown specialty id(s): {', '.join(str(i) for i in missing)}",
            fields.to_json_dict(),
        )

    vet.first_name = fields.first_name
    vet.last_name = fields.last_name
    vet.set_specialties(specialties)


async def build_vet(session: AsyncSession, fields: VetFields) -> Vet:
    vet = Vet()
    await apply_vet(session, vet, fields)
    return vet


handler = ResourceHandler(
    VetRepository(),
    VetFields,
    VetResponse,
    build=build_vet,
    apply=apply_vet,
    location=router.prefix,
)


@router.get("", response_model=List[VetResponse], dependencies=[vet_admin])
async def list_vets(session: AsyncSession = Depends(get_db_session)):
    return await handler.list_all(session)


@router.get("/{vet_id}", response_model=VetResponse, dependencies=[vet_admin])
async def get_vet(vet_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.retrieve(session, vet_id)


@router.post(
    "",
    response_model=VetResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[vet_admin],
)
async def add_vet(
    payload: Any = Body(None), session: AsyncSession = Depends(get_db_session)
):
    return await handler.create(session, payload)


@router.put(
    "/{vet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[vet_admin]
)
async def update_vet(
    vet_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, vet_id, payload)


@router.delete(
    "/{vet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[vet_admin]
)
async def delete_vet(vet_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.delete(session, vet_id)
