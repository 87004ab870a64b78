"""
Field validation helpers used by the request schemas.

A ``Validator`` collects at most one message per field so the client
sees the first problem with each input::

    v = Validator()
    validate_string(v, "name", payload.name, True, 2, 50)
    if not v.valid():
        raise v.to_app_error()
"""

import re

from helpdesk.errors import ValidationError, validation

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

class Validator:
    """Accumulates field -> message errors."""

    def __init__(self):
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        """Record ``message`` unless the field already has an error."""
        self.errors.setdefault(field, message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)

    def to_app_error(self) -> ValidationError | None:
        """Return a ``VALIDATION_ERROR`` carrying the collected details."""
        if self.valid():
            return None
        return validation("Validation failed").with_details(dict(self.errors))

    def raise_if_invalid(self) -> None:
        error = self.to_app_error()
        if error is not None:
            raise error

def required(value: str | None) -> bool:
    return value is not None and value.strip() != ""

def min_length(value: str, minimum: int) -> bool:
    return len(value) >= minimum

def max_length(value: str, maximum: int) -> bool:
    return len(value) <= maximum

def validate_email(value: str) -> bool:
    return _EMAIL_PATTERN.match(value) is not None

def validate_string(
    v: Validator,
    field: str,
    value: str | None,
    is_required: bool,
    min_len: int = 0,
    max_len: int = 0,
) -> None:
    """
    Apply the standard required / length checks to a string field.

    Length limits of zero are skipped.  Lengths count characters, not
    bytes.
    """
    if is_required:
        v.check(required(value), field, f"{field} is required")

    if value:
        if min_len > 0:
            v.check(
                min_length(value, min_len),
                field,
                f"{field} must be at least {min_len} characters long",
            )
        if max_len > 0:
            v.check(
                max_length(value, max_len),
                field,
                f"{field} must not be more than {max_len} characters long",
            )

def validate_choice(
    v: Validator, field: str, value: str, choices: tuple[str, ...]
) -> None:
    """Require ``value`` to be one of ``choices``."""
    if not value:
        v.add_error(field, "Required")
    elif value not in choices:
        v.add_error(field, f"Must be one of: {', '.join(choices)}")

def validate_positive_id(v: Validator, field: str, value: int | None) -> None:
    if value is None or value <= 0:
        v.add_error(field, "Required and must be greater than 0")
