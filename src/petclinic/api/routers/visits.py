"""
Visit endpoints under ``/api/visits``.

New visits are created through their pet
(``POST /api/owners/{ownerId}/pets/{petId}/visits``).
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Visit
from ...repositories import VisitRepository
from ...schemas import VisitFields, VisitResponse
from ...security import Role, has_role
from ..dependencies import get_db_session, require
from ..handlers import ResourceHandler

router = APIRouter(prefix="/api/visits", tags=["visits"])

owner_admin = Depends(require(has_role(Role.OWNER_ADMIN)))


async def apply_visit(session: AsyncSession, visit: Visit, fields: VisitFields) -> None:
    # An update without a date keeps the recorded one
    if fields.visit_date is not None:
        visit.visit_date = fields.visit_date
    visit.description = fields.description


handler = ResourceHandler(
    VisitRepository(),
    VisitFields,
    VisitResponse,
    apply=apply_visit,
    location=router.prefix,
)


@router.get("", response_model=List[VisitResponse], dependencies=[owner_admin])
async def list_visits(session: AsyncSession = Depends(get_db_session)):
    return await handler.list_all(session)


@router.get("/{visit_id}", response_model=VisitResponse, dependencies=[owner_admin])
async def get_visit(visit_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.retrieve(session, visit_id)


@router.put(
    "/{visit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[owner_admin],
)
async def update_visit(
    visit_id: int,
    payload: Any = Body(None),
    session: AsyncSession = Depends(get_db_session),
):
    return await handler.update(session, visit_id, payload)


@router.delete(
    "/{visit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[owner_admin],
)
async def delete_visit(visit_id: int, session: AsyncSession = Depends(get_db_session)):
    return await handler.delete(session, visit_id)
