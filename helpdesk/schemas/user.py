"""User request/response schemas."""

from dataclasses import dataclass
from typing import Any, Mapping

from helpdesk.binding import (
    body_bool,
    body_int,
    body_optional_str,
    body_str,
    query_bool,
    query_int,
    query_str,
)
from helpdesk.models.user import VALID_ROLES, User
from helpdesk.responses import PaginationQuery, format_timestamp, map_responses
from helpdesk.validators import (
    Validator,
    validate_choice,
    validate_email,
    validate_positive_id,
    validate_string,
)

PHONE_MAX = 15
PASSWORD_MIN = 6
PASSWORD_MAX = 72
# bcrypt only hashes the first 72 bytes.
PASSWORD_MAX_BYTES = 72


@dataclass
class CreateUserRequest:
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str | None = None
    role: str = ""
    division_id: int | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "CreateUserRequest":
        return cls(
            name=body_str(payload, "name"),
            email=body_str(payload, "email"),
            password=body_str(payload, "password"),
            phone=body_optional_str(payload, "phone"),
            role=body_str(payload, "role"),
            division_id=body_int(payload, "divisionId"),
        )

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "name", self.name.strip(), True, 2, 50)

        email = self.email.strip()
        validate_string(v, "email", email, True, 5, 255)
        if email and not validate_email(email):
            v.add_error("email", "Must be a valid email address")

        validate_string(
            v, "password", self.password, True, PASSWORD_MIN, PASSWORD_MAX
        )
        if len(self.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            v.add_error(
                "password",
                f"password must not be more than {PASSWORD_MAX_BYTES} bytes long",
            )
        if self.phone is not None:
            validate_string(v, "phone", self.phone.strip(), False, 0, PHONE_MAX)
        validate_choice(v, "role", self.role.strip(), VALID_ROLES)
        validate_positive_id(v, "divisionId", self.division_id)
        v.raise_if_invalid()


@dataclass
class UpdateUserRequest:
    name: str = ""
    phone: str | None = None
    role: str = ""
    division_id: int | None = None
    is_active: bool | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "UpdateUserRequest":
        return cls(
            name=body_str(payload, "name"),
            phone=body_optional_str(payload, "phone"),
            role=body_str(payload, "role"),
            division_id=body_int(payload, "divisionId"),
            is_active=body_bool(payload, "isActive"),
        )

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "name", self.name.strip(), True, 2, 50)
        if self.phone is not None:
            validate_string(v, "phone", self.phone.strip(), False, 0, PHONE_MAX)
        validate_choice(v, "role", self.role.strip(), VALID_ROLES)
        validate_positive_id(v, "divisionId", self.division_id)
        v.raise_if_invalid()


@dataclass
class UserListFilter:
    page: int
    limit: int
    offset: int
    name: str = ""
    role: str = ""
    division_id: int = 0
    is_active: bool | None = None


@dataclass
class GetUsersQuery(PaginationQuery):
    name: str = ""
    role: str = ""
    division_id: int = 0
    is_active: bool | None = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "GetUsersQuery":
        return cls(
            page=query_int(args, "page"),
            limit=query_int(args, "limit"),
            name=query_str(args, "name"),
            role=query_str(args, "role"),
            division_id=query_int(args, "divisionId"),
            is_active=query_bool(args, "isActive"),
        )

    def normalize(self) -> UserListFilter:
        page, limit, offset = self.normalize_pagination()
        return UserListFilter(
            page=page,
            limit=limit,
            offset=offset,
            name=self.name.strip(),
            role=self.role.strip(),
            division_id=self.division_id,
            is_active=self.is_active,
        )


def public_url(path: str | None, base_url: str) -> str | None:
    """Prefix a stored upload path with the public base URL."""
    if not path:
        return None
    return f"{base_url.rstrip('/')}{path}"


def to_user_response(user: User, base_url: str = "") -> dict[str, Any]:
    # Never include the password hash.
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "avatarUrl": public_url(user.avatar_url, base_url),
        "phone": user.phone,
        "role": user.role,
        "divisionId": user.division_id,
        "divisionName": user.division_name,
        "isActive": user.is_active,
        "createdAt": format_timestamp(user.created_at),
    }


def to_user_responses(users: list[User], base_url: str = "") -> list[dict[str, Any]]:
    return map_responses(users, lambda user: to_user_response(user, base_url))
