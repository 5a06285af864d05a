"""
Shared Pydantic configuration for API schemas.

All schemas read and write camelCase JSON (``firstName``) while exposing
snake_case attributes in Python, and can be built straight from ORM objects.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiSchema(BaseModel):
    """Base class for request and response schemas."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump to a JSON-compatible dict keyed by the camelCase aliases."""
        return self.model_dump(mode="json", by_alias=True)


class EntityReference(ApiSchema):
    """Reference to an existing entity by identity (e.g. a pet's type)."""

    id: int
    name: Optional[str] = None
