"""Category request/response schemas."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from helpdesk.binding import body_bool, body_str, query_bool, query_int, query_str
from helpdesk.models.itsm import Category
from helpdesk.responses import (
    PaginationQuery,
    format_timestamp,
    map_responses,
    parse_date,
)
from helpdesk.validators import Validator, validate_string

NAME_MIN = 2
NAME_MAX = 20


@dataclass
class CreateCategoryRequest:
    name: str = ""

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "CreateCategoryRequest":
        return cls(name=body_str(payload, "name"))

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "name", self.name.strip(), True, NAME_MIN, NAME_MAX)
        v.raise_if_invalid()


@dataclass
class UpdateCategoryRequest:
    name: str = ""
    is_active: bool | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "UpdateCategoryRequest":
        return cls(
            name=body_str(payload, "name"),
            is_active=body_bool(payload, "isActive"),
        )

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "name", self.name.strip(), True, NAME_MIN, NAME_MAX)
        v.raise_if_invalid()


@dataclass
class CategoryListFilter:
    page: int
    limit: int
    offset: int
    name: str = ""
    is_active: bool | None = None
    created_at: date | None = None


@dataclass
class GetCategoriesQuery(PaginationQuery):
    name: str = ""
    is_active: bool | None = None
    created_at: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "GetCategoriesQuery":
        return cls(
            page=query_int(args, "page"),
            limit=query_int(args, "limit"),
            name=query_str(args, "name"),
            is_active=query_bool(args, "isActive"),
            created_at=query_str(args, "createdAt"),
        )

    def normalize(self) -> CategoryListFilter:
        page, limit, offset = self.normalize_pagination()
        return CategoryListFilter(
            page=page,
            limit=limit,
            offset=offset,
            name=self.name.strip(),
            is_active=self.is_active,
            created_at=parse_date(self.created_at),
        )


def to_category_response(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "isActive": category.is_active,
        "createdAt": format_timestamp(category.created_at),
    }


def to_category_responses(categories: list[Category]) -> list[dict[str, Any]]:
    return map_responses(categories, to_category_response)
