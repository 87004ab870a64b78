"""
Response envelope, pagination and list helpers shared by every feature.

Every JSON body produced by the API has the same outer shape::

    {"message": "...", "data": {...}, "meta": {"timestamp": "..."}}
    {"error": {"code": "...", "message": "...", "details": {...}},
     "meta": {"timestamp": "..."}}

List endpoints put a ``ListResponse`` in ``data``::

    {"items": [...], "pagination": {"page": 1, "limit": 10,
                                    "totalItems": 42, "totalPages": 5}}
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, Iterable, TypeVar

from flask import jsonify

from helpdesk.errors import AppError, bad_request

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

DATE_FORMAT = "%Y-%m-%d"


# =========================================================================
# Pagination
# =========================================================================


@dataclass
class PaginationQuery:
    """Raw ``page``/``limit`` query values; zero means "not supplied"."""

    page: int = 0
    limit: int = 0

    def normalize_pagination(self) -> tuple[int, int, int]:
        """
        Clamp the raw values and derive the row offset.

        Returns:
            ``(page, limit, offset)`` where page >= 1, 1 <= limit <= 100
            and ``offset = (page - 1) * limit``.
        """
        page = self.page
        if page < 1:
            page = DEFAULT_PAGE

        limit = self.limit
        if limit < 1:
            limit = DEFAULT_LIMIT
        if limit > MAX_LIMIT:
            limit = MAX_LIMIT

        offset = (page - 1) * limit
        return page, limit, offset


@dataclass
class PaginationResponse:
    page: int
    limit: int
    total_items: int
    total_pages: int

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
        }


@dataclass
class ListResponse(Generic[T]):
    """One page of items plus the pagination block."""

    items: list[T] = field(default_factory=list)
    pagination: PaginationResponse = field(
        default_factory=lambda: PaginationResponse(DEFAULT_PAGE, DEFAULT_LIMIT, 0, 0)
    )

    def to_dict(self) -> dict[str, Any]:
        return {"items": self.items, "pagination": self.pagination.to_dict()}


def calculate_total_pages(total_items: int, limit: int) -> int:
    """Number of pages needed for ``total_items``; zero when there are none."""
    if total_items == 0:
        return 0
    return (total_items + limit - 1) // limit


def build_list_response(
    items: list[T], page: int, limit: int, total_items: int
) -> ListResponse[T]:
    """Wrap a page of already-mapped items in a ``ListResponse``."""
    return ListResponse(
        items=items,
        pagination=PaginationResponse(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=calculate_total_pages(total_items, limit),
        ),
    )


def map_responses(items: Iterable[T], mapper: Callable[[T], R]) -> list[R]:
    """Apply a model -> response mapper to every item."""
    return [mapper(item) for item in items]


# =========================================================================
# Value formatting
# =========================================================================


def parse_date(value: str | None) -> date | None:
    """
    Parse a ``YYYY-MM-DD`` filter value.

    Returns:
        ``None`` for a blank value, otherwise the parsed date.

    Raises:
        BadRequestError: If the value is not in ``YYYY-MM-DD`` format.
    """
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        raise bad_request("Date must use YYYY-MM-DD format") from exc


def format_timestamp(value: datetime | None) -> str | None:
    """Render a stored timestamp as RFC 3339; naive values are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _meta() -> dict[str, str]:
    return {
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    }


# =========================================================================
# Envelopes
# =========================================================================


def success(status_code: int, message: str = "", data: Any = None):
    """Build a success envelope; empty ``message``/``data`` are omitted."""
    if isinstance(data, ListResponse):
        data = data.to_dict()

    body: dict[str, Any] = {}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body["meta"] = _meta()
    return jsonify(body), status_code


def ok(message: str, data: Any = None):
    return success(200, message, data)


def created(message: str, data: Any = None):
    return success(201, message, data)


def deleted(message: str):
    """Body returned by every DELETE endpoint."""
    return jsonify({"success": True, "message": message}), 200


def error(err: AppError):
    """Build the error envelope for an ``AppError``."""
    return jsonify({"error": err.to_dict(), "meta": _meta()}), err.status_code
