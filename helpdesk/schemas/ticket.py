"""Ticket request/response schemas."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from helpdesk.binding import body_int, body_str, query_int, query_str
from helpdesk.models.itsm import VALID_PRIORITIES, VALID_STATUSES, Ticket
from helpdesk.responses import (
    PaginationQuery,
    format_timestamp,
    map_responses,
    parse_date,
)
from helpdesk.validators import (
    Validator,
    validate_choice,
    validate_positive_id,
    validate_string,
)

TITLE_MIN = 3
TITLE_MAX = 100
DESCRIPTION_MAX = 5000


def _validate_assignee(v: Validator, assigned_to: int | None) -> None:
    if assigned_to is not None and assigned_to <= 0:
        v.add_error("assignedTo", "Must be greater than 0")


@dataclass
class CreateTicketRequest:
    title: str = ""
    description: str = ""
    category_id: int | None = None
    priority: str = ""
    created_by: int | None = None
    assigned_to: int | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "CreateTicketRequest":
        return cls(
            title=body_str(payload, "title"),
            description=body_str(payload, "description"),
            category_id=body_int(payload, "categoryId"),
            priority=body_str(payload, "priority"),
            created_by=body_int(payload, "createdBy"),
            assigned_to=body_int(payload, "assignedTo"),
        )

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "title", self.title.strip(), True, TITLE_MIN, TITLE_MAX)
        validate_string(
            v, "description", self.description.strip(), True, 0, DESCRIPTION_MAX
        )
        validate_positive_id(v, "categoryId", self.category_id)
        validate_choice(v, "priority", self.priority.strip(), VALID_PRIORITIES)
        validate_positive_id(v, "createdBy", self.created_by)
        _validate_assignee(v, self.assigned_to)
        v.raise_if_invalid()


@dataclass
class UpdateTicketRequest:
    """
    Full update of the editable ticket fields.

    ``assignedTo`` is optional: when the key is absent the current
    assignee is kept, an explicit ``null`` unassigns the ticket.
    """

    title: str = ""
    description: str = ""
    category_id: int | None = None
    priority: str = ""
    status: str = ""
    assigned_to: int | None = None
    assigned_to_provided: bool = False

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "UpdateTicketRequest":
        return cls(
            title=body_str(payload, "title"),
            description=body_str(payload, "description"),
            category_id=body_int(payload, "categoryId"),
            priority=body_str(payload, "priority"),
            status=body_str(payload, "status"),
            assigned_to=body_int(payload, "assignedTo"),
            assigned_to_provided="assignedTo" in payload,
        )

    def validate(self) -> None:
        v = Validator()
        validate_string(v, "title", self.title.strip(), True, TITLE_MIN, TITLE_MAX)
        validate_string(
            v, "description", self.description.strip(), True, 0, DESCRIPTION_MAX
        )
        validate_positive_id(v, "categoryId", self.category_id)
        validate_choice(v, "priority", self.priority.strip(), VALID_PRIORITIES)
        validate_choice(v, "status", self.status.strip(), VALID_STATUSES)
        _validate_assignee(v, self.assigned_to)
        v.raise_if_invalid()


@dataclass
class TicketListFilter:
    page: int
    limit: int
    offset: int
    title: str = ""
    status: str = ""
    priority: str = ""
    category_id: int = 0
    created_by: int = 0
    assigned_to: int = 0
    created_at: date | None = None


@dataclass
class GetTicketsQuery(PaginationQuery):
    title: str = ""
    status: str = ""
    priority: str = ""
    category_id: int = 0
    created_by: int = 0
    assigned_to: int = 0
    created_at: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "GetTicketsQuery":
        return cls(
            page=query_int(args, "page"),
            limit=query_int(args, "limit"),
            title=query_str(args, "title"),
            status=query_str(args, "status"),
            priority=query_str(args, "priority"),
            category_id=query_int(args, "categoryId"),
            created_by=query_int(args, "createdBy"),
            assigned_to=query_int(args, "assignedTo"),
            created_at=query_str(args, "createdAt"),
        )

    def normalize(self) -> TicketListFilter:
        page, limit, offset = self.normalize_pagination()
        return TicketListFilter(
            page=page,
            limit=limit,
            offset=offset,
            title=self.title.strip(),
            status=self.status.strip().upper(),
            priority=self.priority.strip().upper(),
            category_id=self.category_id,
            created_by=self.created_by,
            assigned_to=self.assigned_to,
            created_at=parse_date(self.created_at),
        )


def to_ticket_response(ticket: Ticket) -> dict[str, Any]:
    return {
        "id": ticket.id,
        "title": ticket.title,
        "description": ticket.description,
        "categoryId": ticket.category_id,
        "categoryName": ticket.category.name if ticket.category else None,
        "priority": ticket.priority,
        "status": ticket.status,
        "createdBy": ticket.created_by,
        "assignedTo": ticket.assigned_to,
        "createdAt": format_timestamp(ticket.created_at),
        "assignedAt": format_timestamp(ticket.assigned_at),
        "resolvedAt": format_timestamp(ticket.resolved_at),
        "closedAt": format_timestamp(ticket.closed_at),
    }


def to_ticket_responses(tickets: list[Ticket]) -> list[dict[str, Any]]:
    return map_responses(tickets, to_ticket_response)
