"""
Tests for payload validation and the Pydantic schemas.
"""

from datetime import date, timedelta

import pytest

from petclinic.schemas import (
    OwnerFields,
    PetFields,
    PetTypeFields,
    SpecialtyFields,
    VetFields,
    VisitFields,
)
from petclinic.utils.validation import (
    BLANK_MESSAGE,
    ConstraintViolation,
    ValidationResult,
    require_not_blank,
    validate_payload,
    validate_telephone,
)


def valid_owner(**overrides):
    payload = {
        "firstName": "George",
        "lastName": "Franklin",
        "address": "110 W. Liberty St.",
        "city": "Madison",
        "telephone": "6085551023",
    }
    payload.update(overrides)
    return payload


class TestValidationHelpers:
    """Test cases for the field validator helpers."""

    def test_require_not_blank_keeps_value_as_sent(self):
        assert require_not_blank("  cat ") == "  cat "

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_require_not_blank_rejects(self, value):
        with pytest.raises(ValueError, match=BLANK_MESSAGE):
            require_not_blank(value)

    def test_validate_telephone(self):
        assert validate_telephone("6085551023") == "6085551023"

    @pytest.mark.parametrize("value", ["12345678901", "608-555", "phone"])
    def test_validate_telephone_rejects(self, value):
        with pytest.raises(ValueError, match="numeric value out of bounds"):
            validate_telephone(value)


class TestValidationResult:
    """Test cases for violation collection."""

    def test_empty_result_is_valid(self):
        assert ValidationResult().is_valid

    def test_violation_map_joins_messages_per_field(self):
        result = ValidationResult()
        result.add_violation(ConstraintViolation("name", "must not be blank"))
        result.add_violation(ConstraintViolation("name", "too short"))
        result.add_violation(ConstraintViolation("city", "must not be null"))

        assert not result.is_valid
        assert result.violation_map() == {
            "name": "must not be blank; too short",
            "city": "must not be null",
        }

    def test_constraint_violation_equality(self):
        assert ConstraintViolation("name", "x") == ConstraintViolation("name", "x")
        assert len({ConstraintViolation("name", "x"), ConstraintViolation("name", "x")}) == 1


class TestValidatePayload:
    """Test cases for the validation stage."""

    def test_valid_pet_type(self):
        result = validate_payload(PetTypeFields, {"name": "cat"})

        assert result.is_valid
        assert result.value.name == "cat"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_is_keyed_on_name(self, name):
        result = validate_payload(PetTypeFields, {"name": name})

        assert result.value is None
        assert result.violation_map() == {"name": BLANK_MESSAGE}

    def test_missing_name(self):
        result = validate_payload(SpecialtyFields, {})

        assert result.violation_map() == {"name": "must not be null"}

    def test_name_too_long(self):
        result = validate_payload(PetTypeFields, {"name": "x" * 81})

        assert result.violation_map() == {"name": "size must be between 0 and 80"}

    @pytest.mark.parametrize("payload", [None, ["cat"], "cat"])
    def test_non_object_payload(self, payload):
        result = validate_payload(PetTypeFields, payload)

        assert "root" in result.violation_map()

    def test_owner_telephone(self):
        result = validate_payload(OwnerFields, valid_owner(telephone="12345678901"))

        assert list(result.violation_map()) == ["telephone"]

    def test_owner_accepts_snake_case(self):
        payload = {
            "first_name": "George",
            "last_name": "Franklin",
            "address": "110 W. Liberty St.",
            "city": "Madison",
            "telephone": "6085551023",
        }

        assert validate_payload(OwnerFields, payload).is_valid

    def test_pet_requires_type(self):
        result = validate_payload(PetFields, {"name": "Leo"})

        assert result.violation_map() == {"type": "must not be null"}

    def test_pet_birth_date_in_future(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()

        result = validate_payload(
            PetFields, {"name": "Leo", "birthDate": tomorrow, "type": {"id": 1}}
        )

        assert result.violation_map() == {
            "birthDate": "must be a date in the past or in the present"
        }

    def test_pet_parses_type_reference(self):
        result = validate_payload(
            PetFields, {"name": "Leo", "birthDate": "2010-09-07", "type": {"id": 1, "name": "cat"}}
        )

        assert result.value.type.id == 1
        assert result.value.birth_date == date(2010, 9, 7)

    def test_visit_date_is_optional(self):
        result = validate_payload(VisitFields, {"description": "rabies shot"})

        assert result.is_valid
        assert result.value.visit_date is None

    def test_visit_date_uses_date_key(self):
        result = validate_payload(
            VisitFields, {"date": "2013-01-01", "description": "rabies shot"}
        )

        assert result.value.visit_date == date(2013, 1, 1)

    def test_vet_specialties_default_empty(self):
        result = validate_payload(VetFields, {"firstName": "James", "lastName": "Carter"})

        assert result.value.specialties == []

    def test_vet_blank_names(self):
        result = validate_payload(VetFields, {"firstName": "", "lastName": " "})

        assert result.violation_map() == {
            "firstName": BLANK_MESSAGE,
            "lastName": BLANK_MESSAGE,
        }
