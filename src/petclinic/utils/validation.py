"""
Validation utilities for inbound payloads.

Payloads are checked against the Pydantic schemas declared in
``petclinic.schemas``; every failed constraint becomes a
``ConstraintViolation`` keyed on the JSON field path, so callers can report
a field -> message map without knowing anything about Pydantic.
"""

import re
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import format_validation_errors

T = TypeVar("T", bound=BaseModel)

BLANK_MESSAGE = "must not be blank"

TELEPHONE_PATTERN = re.compile(r"^\d{1,10}$")


class ConstraintViolation:
    """A single failed constraint on one field of a payload."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        """Convert the violation to a dictionary format."""
        return {"field": self.field, "message": self.message}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintViolation):
            return NotImplemented
        return (self.field, self.message) == (other.field, other.message)

    def __hash__(self) -> int:
        return hash((self.field, self.message))

    def __repr__(self) -> str:
        return f"ConstraintViolation(field={self.field!r}, message={self.message!r})"


class ValidationResult(Generic[T]):
    """Result of validating a payload: the parsed value or its violations."""

    def __init__(
        self,
        value: Optional[T] = None,
        violations: Optional[List[ConstraintViolation]] = None,
    ):
        self.value = value
        self.violations = violations or []

    @property
    def is_valid(self) -> bool:
        """An empty violation set means the payload is valid."""
        return len(self.violations) == 0

    def add_violation(self, violation: ConstraintViolation) -> None:
        """Add a violation to the result."""
        self.violations.append(violation)
        self.value = None

    def violation_map(self) -> Dict[str, str]:
        """
        Collapse the violations to a field -> message mapping.

        When a field fails several constraints the messages are joined with
        ``"; "`` so that no violation is dropped.
        """
        result: Dict[str, str] = {}
        for violation in self.violations:
            if violation.field in result:
                result[violation.field] = f"{result[violation.field]}; {violation.message}"
            else:
                result[violation.field] = violation.message
        return result


def require_not_blank(value: Optional[str]) -> str:
    """
    Field-validator helper rejecting empty or whitespace-only strings.

    Accepted values are returned as sent, surrounding whitespace included.

    Raises:
        ValueError: If the value is blank
    """
    if value is None or not value.strip():
        raise ValueError(BLANK_MESSAGE)
    return value


def validate_telephone(value: str) -> str:
    """
    Field-validator helper for owner telephone numbers (1 to 10 digits).

    Raises:
        ValueError: If the value is not a digit string of acceptable length
    """
    value = require_not_blank(value)
    if not TELEPHONE_PATTERN.match(value):
        raise ValueError(
            "numeric value out of bounds (<10 digits>.<0 digits> expected)"
        )
    return value


def validate_payload(schema: Type[T], payload: Any) -> ValidationResult[T]:
    """
    Validate a raw payload against a schema.

    Args:
        schema: Pydantic model class declaring the constraints
        payload: Decoded JSON body (normally a dict)

    Returns:
        ValidationResult holding either the parsed model or the violations
    """
    result: ValidationResult[T] = ValidationResult()

    if not isinstance(payload, dict):
        result.add_violation(
            ConstraintViolation("root", "request body must be a JSON object")
        )
        return result

    try:
        result.value = schema.model_validate(payload)
    except PydanticValidationError as e:
        formatted = format_validation_errors(e.errors())
        for field_path, messages in formatted.items():
            for message in messages:
                result.add_violation(ConstraintViolation(field_path, message))

    return result
