"""
Request handler and response shaper for the REST resources.

A ``ResourceHandler`` runs the write pipeline for one resource:

1. validate the raw payload (400 with the violation map, nothing persisted)
2. for updates, look up the target (404 when absent, nothing persisted)
3. apply the payload, save through the repository and commit
4. answer 201 with the entity (create) or 204 (update)

Reads answer 200, except that an empty collection answers 404. Deletes look
the entity up (404 when absent) and answer 204.

Authorization is not handled here: role guards are route dependencies and
have already run by the time a handler method is called.
"""

import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Optional,
    Sequence,
    Type,
    TypeVar,
)

from fastapi import Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import atomic
from ..exceptions import NotFoundException, ValidationException
from ..models.base import BaseModel as EntityModel
from ..repositories import BaseRepository
from ..schemas import ApiSchema
from ..utils.validation import validate_payload

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=EntityModel)
FieldsT = TypeVar("FieldsT", bound=ApiSchema)

EntityBuilder = Callable[[AsyncSession, Any], Awaitable[Any]]
EntityUpdater = Callable[[AsyncSession, Any, Any], Awaitable[None]]


def validate(schema: Type[FieldsT], payload: Any) -> FieldsT:
    """
    Run the validation stage on a raw payload.

    Args:
        schema: Payload schema declaring the constraints
        payload: Decoded request body

    Returns:
        The parsed payload

    Raises:
        ValidationException: If any constraint is violated
    """
    result = validate_payload(schema, payload)
    if not result.is_valid:
        violations = result.violation_map()
        logger.warning(f"{schema.__name__} payload rejected: {violations}")
        raise ValidationException(
            f"Invalid {schema.__name__} payload",
            violations=violations,
            payload=payload,
            schema_name=schema.__name__,
        )
    return result.value


def reject_reference(field: str, message: str, payload: Any) -> ValidationException:
    """Build the 400 raised when a payload references a missing entity."""
    logger.warning(f"Rejected payload reference {field}: {message}")
    return ValidationException(
        f"Invalid reference in field '{field}'",
        violations={field: message},
        payload=payload,
    )


def render(schema: Type[ApiSchema], entity: Any) -> Dict[str, Any]:
    """Shape an entity into its JSON response form."""
    return schema.model_validate(entity).to_json_dict()


def render_collection(
    schema: Type[ApiSchema], entities: Sequence[Any], resource: str
) -> JSONResponse:
    """
    Shape a collection read.

    Raises:
        NotFoundException: If the collection is empty
    """
    if not entities:
        raise NotFoundException(resource)
    return JSONResponse([render(schema, entity) for entity in entities])


class ResourceHandler(Generic[EntityT, FieldsT]):
    """
    CRUD pipeline for one resource.

    Args:
        repository: Gateway for the resource's entity type
        fields_schema: Schema validating create/update payloads
        response_schema: Schema shaping the entity in responses
        build: Coroutine turning a validated payload into a new entity
        apply: Coroutine copying a validated payload onto an existing entity
        location: Path prefix used for the ``Location`` header of creates
    """

    def __init__(
        self,
        repository: BaseRepository[EntityT],
        fields_schema: Type[FieldsT],
        response_schema: Type[ApiSchema],
        build: Optional[EntityBuilder] = None,
        apply: Optional[EntityUpdater] = None,
        location: Optional[str] = None,
    ):
        self.repository = repository
        self.fields_schema = fields_schema
        self.response_schema = response_schema
        self.build = build
        self.apply = apply
        self.location = location

    @property
    def resource(self) -> str:
        return self.repository.resource_name

    async def list_all(self, session: AsyncSession) -> JSONResponse:
        entities = await self.repository.list_all(session)
        return render_collection(self.response_schema, entities, self.resource)

    async def retrieve(self, session: AsyncSession, entity_id: int) -> JSONResponse:
        entity = await self.repository.find_by_id(session, entity_id)
        return JSONResponse(render(self.response_schema, entity))

    async def create(self, session: AsyncSession, payload: Any) -> JSONResponse:
        """Validate, build and insert a new entity; answer 201 with it."""
        fields = validate(self.fields_schema, payload)
        async with atomic(session):
            entity = await self.build(session, fields)
            entity = await self.repository.save(session, entity)
            body = render(self.response_schema, entity)

        headers = {}
        if self.location:
            headers["Location"] = f"{self.location}/{entity.id}"
        return JSONResponse(body, status_code=status.HTTP_201_CREATED, headers=headers)

    async def update(
        self, session: AsyncSession, entity_id: int, payload: Any
    ) -> Response:
        """Validate, look up, overwrite and save an entity; answer 204."""
        fields = validate(self.fields_schema, payload)
        async with atomic(session):
            entity = await self.repository.find_by_id(session, entity_id)
            await self.apply(session, entity, fields)
            await self.repository.save(session, entity)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def delete(self, session: AsyncSession, entity_id: int) -> Response:
        """Look up and delete an entity with its dependents; answer 204."""
        async with atomic(session):
            entity = await self.repository.find_by_id(session, entity_id)
            await self.repository.delete(session, entity)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
