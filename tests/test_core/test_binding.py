"""
Tests for request binding: path ids, query strings and JSON bodies.
"""

import pytest

from helpdesk.binding import (
    INT_MAX,
    INT_MIN,
    body_bool,
    body_int,
    body_optional_str,
    body_str,
    form_int,
    json_body,
    parse_id,
    query_bool,
    query_int,
)
from helpdesk.errors import BadRequestError


class TestParseId:
    def test_integer_id(self):
        assert parse_id("42", "ticket") == 42

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", "12a", "12\n"])
    def test_non_integer_id(self, raw):
        with pytest.raises(BadRequestError, match="Invalid ticket ID"):
            parse_id(raw, "ticket")

    def test_integer_bounds(self):
        assert parse_id(str(INT_MAX), "ticket") == INT_MAX
        assert parse_id(str(INT_MIN), "ticket") == INT_MIN

    @pytest.mark.parametrize(
        "raw", [str(INT_MAX + 1), str(INT_MIN - 1), "99999999999999999999"]
    )
    def test_out_of_range_id(self, raw):
        with pytest.raises(BadRequestError, match="Invalid ticket ID"):
            parse_id(raw, "ticket")

    @pytest.mark.parametrize("raw", ["١", "１", "1٢"])
    def test_non_ascii_digits(self, raw):
        with pytest.raises(BadRequestError, match="Invalid ticket ID"):
            parse_id(raw, "ticket")


class TestQueryValues:
    """Query-string parsing used by every list endpoint."""

    def test_query_int_blank_is_zero(self):
        assert query_int({}, "page") == 0
        assert query_int({"page": " "}, "page") == 0

    def test_query_int_invalid(self):
        with pytest.raises(BadRequestError, match="Invalid query parameters"):
            query_int({"page": "two"}, "page")

    @pytest.mark.parametrize("raw", ["99999999999999999999", "2147483648", "٣"])
    def test_query_int_out_of_range_or_non_ascii(self, raw):
        with pytest.raises(BadRequestError, match="Invalid query parameters"):
            query_int({"page": raw}, "page")

    @pytest.mark.parametrize("raw", ["1", "t", "TRUE", "true", "True"])
    def test_query_bool_true(self, raw):
        assert query_bool({"isActive": raw}, "isActive") is True

    @pytest.mark.parametrize("raw", ["0", "f", "FALSE", "false", "False"])
    def test_query_bool_false(self, raw):
        assert query_bool({"isActive": raw}, "isActive") is False

    def test_query_bool_absent_is_none(self):
        assert query_bool({}, "isActive") is None

    def test_query_bool_invalid(self):
        with pytest.raises(BadRequestError, match="Invalid query parameters"):
            query_bool({"isActive": "yes"}, "isActive")


class TestBodyValues:
    """Typed access to decoded JSON bodies."""

    def test_body_str_missing_and_null_are_empty(self):
        assert body_str({}, "name") == ""
        assert body_str({"name": None}, "name") == ""

    def test_body_optional_str_keeps_none(self):
        assert body_optional_str({"phone": None}, "phone") is None
        assert body_optional_str({"phone": "555"}, "phone") == "555"

    def test_wrong_type_names_the_field(self):
        with pytest.raises(BadRequestError) as exc_info:
            body_str({"name": 12}, "name")
        assert exc_info.value.message == "Invalid request body"
        assert exc_info.value.details == {"name": "must be a string"}

    def test_body_int_rejects_booleans_and_strings(self):
        assert body_int({"categoryId": 3}, "categoryId") == 3
        with pytest.raises(BadRequestError):
            body_int({"categoryId": True}, "categoryId")
        with pytest.raises(BadRequestError):
            body_int({"categoryId": "3"}, "categoryId")

    def test_body_int_out_of_range(self):
        with pytest.raises(BadRequestError) as exc_info:
            body_int({"categoryId": 2**31}, "categoryId")
        assert exc_info.value.message == "Invalid request body"
        assert exc_info.value.details == {"categoryId": "is out of range"}

    def test_body_bool(self):
        assert body_bool({"isActive": False}, "isActive") is False
        assert body_bool({}, "isActive") is None
        with pytest.raises(BadRequestError):
            body_bool({"isActive": "false"}, "isActive")

    def test_form_int(self):
        assert form_int({"uploadedBy": "7"}, "uploadedBy") == 7
        assert form_int({}, "uploadedBy") is None
        with pytest.raises(BadRequestError):
            form_int({"uploadedBy": "seven"}, "uploadedBy")
        with pytest.raises(BadRequestError):
            form_int({"uploadedBy": "99999999999999999999"}, "uploadedBy")


class TestJsonBody:
    def test_object_body(self, app):
        with app.test_request_context(json={"name": "Ops"}):
            assert json_body() == {"name": "Ops"}

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", ""])
    def test_non_object_body(self, app, raw):
        with app.test_request_context(data=raw, content_type="application/json"):
            with pytest.raises(BadRequestError, match="Invalid request body"):
                json_body()
