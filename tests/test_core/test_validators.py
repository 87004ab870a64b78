"""
Tests for the field validation helpers.
"""

import pytest

from helpdesk.errors import ValidationError
from helpdesk.validators import (
    Validator,
    validate_choice,
    validate_email,
    validate_positive_id,
    validate_string,
)


class TestValidator:
    """Tests for error accumulation."""

    def test_first_error_per_field_wins(self):
        v = Validator()
        v.add_error("name", "first")
        v.add_error("name", "second")
        assert v.errors == {"name": "first"}

    def test_valid_validator_has_no_app_error(self):
        v = Validator()
        assert v.valid()
        assert v.to_app_error() is None
        v.raise_if_invalid()

    def test_raise_if_invalid_carries_details(self):
        v = Validator()
        v.check(False, "email", "Must be a valid email address")
        with pytest.raises(ValidationError) as exc_info:
            v.raise_if_invalid()
        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.details == {"email": "Must be a valid email address"}


class TestValidateString:
    """Tests for validate_string()."""

    def test_required_message(self):
        v = Validator()
        validate_string(v, "name", "", True, 2, 50)
        assert v.errors == {"name": "name is required"}

    def test_whitespace_only_is_missing(self):
        v = Validator()
        validate_string(v, "name", "   ", True)
        assert v.errors == {"name": "name is required"}

    def test_min_length_message(self):
        v = Validator()
        validate_string(v, "name", "A", True, 2, 50)
        assert v.errors == {"name": "name must be at least 2 characters long"}

    def test_max_length_message(self):
        v = Validator()
        validate_string(v, "name", "x" * 21, True, 2, 20)
        assert v.errors == {"name": "name must not be more than 20 characters long"}

    def test_lengths_count_characters(self):
        v = Validator()
        validate_string(v, "name", "é" * 20, True, 2, 20)
        assert v.valid()

    def test_optional_empty_value_is_valid(self):
        v = Validator()
        validate_string(v, "phone", "", False, 0, 15)
        assert v.valid()


class TestOtherValidators:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("jane@example.com", True),
            ("jane.doe+it@mail.example.co", True),
            ("jane@example", False),
            ("not-an-email", False),
            ("jane@@example.com", False),
        ],
    )
    def test_validate_email(self, value, expected):
        assert validate_email(value) is expected

    def test_validate_choice(self):
        v = Validator()
        validate_choice(v, "role", "", ("ADMIN", "IT", "STAFF"))
        validate_choice(v, "priority", "HIGH", ("LOW", "MEDIUM", "URGENT"))
        assert v.errors == {
            "role": "Required",
            "priority": "Must be one of: LOW, MEDIUM, URGENT",
        }

    @pytest.mark.parametrize("value", [None, 0, -4])
    def test_validate_positive_id(self, value):
        v = Validator()
        validate_positive_id(v, "divisionId", value)
        assert v.errors == {"divisionId": "Required and must be greater than 0"}
