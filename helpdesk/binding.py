"""
Request binding helpers for path ids, query strings and JSON bodies.

Binding errors are reported as ``BAD_REQUEST``; semantic checks
(required fields, lengths, allowed values) belong to the schemas and
are reported as ``VALIDATION_ERROR``.
"""

import re
from typing import Any, Mapping

from flask import request

from helpdesk.errors import bad_request

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Id and filter columns are 32-bit INTEGERs.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

# Accepted spellings for boolean query values.
_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}

INVALID_QUERY = "Invalid query parameters"
INVALID_BODY = "Invalid request body"


def in_int_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def _parse_int(raw: str | None) -> int | None:
    """Parse an ASCII decimal integer; None when malformed or out of range."""
    if raw is None or not _INT_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    return value if in_int_range(value) else None


# -- Path parameters -------------------------------------------------------


def parse_id(raw: str, entity: str) -> int:
    """
    Convert a path segment to an integer id.

    Raises:
        BadRequestError: ``Invalid <entity> ID`` when not an integer or
                         outside the INTEGER column range.
    """
    value = _parse_int(raw)
    if value is None:
        raise bad_request(f"Invalid {entity} ID")
    return value


# -- Query string ----------------------------------------------------------


def query_str(args: Mapping[str, str], key: str) -> str:
    return args.get(key, "") or ""


def query_int(args: Mapping[str, str], key: str) -> int:
    """Return an integer query value, or 0 when absent or blank."""
    raw = (args.get(key) or "").strip()
    if not raw:
        return 0
    value = _parse_int(raw)
    if value is None:
        raise bad_request(INVALID_QUERY)
    return value


def query_bool(args: Mapping[str, str], key: str) -> bool | None:
    """Return a tri-state boolean filter: None when absent or blank."""
    raw = (args.get(key) or "").strip()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise bad_request(INVALID_QUERY)


# -- JSON body -------------------------------------------------------------


def json_body() -> dict[str, Any]:
    """
    Return the request body as a JSON object.

    Raises:
        BadRequestError: If the body is missing, malformed, or not an object.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise bad_request(INVALID_BODY)
    return payload


def _type_error(key: str, expected: str):
    return bad_request(INVALID_BODY).with_details({key: f"must be {expected}"})


def body_str(payload: Mapping[str, Any], key: str) -> str:
    """Return a string field; missing or null becomes ``""``."""
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _type_error(key, "a string")
    return value


def body_optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    """Return a string field, keeping ``None`` for missing or null."""
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _type_error(key, "a string")
    return value


def body_int(payload: Mapping[str, Any], key: str) -> int | None:
    value = payload.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise _type_error(key, "an integer")
    if not in_int_range(value):
        raise bad_request(INVALID_BODY).with_details({key: "is out of range"})
    return value


def body_bool(payload: Mapping[str, Any], key: str) -> bool | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise _type_error(key, "a boolean")
    return value


# -- Multipart form --------------------------------------------------------


def form_int(form: Mapping[str, str], key: str) -> int | None:
    raw = (form.get(key) or "").strip()
    if not raw:
        return None
    value = _parse_int(raw)
    if value is None:
        raise _type_error(key, "an integer")
    return value
