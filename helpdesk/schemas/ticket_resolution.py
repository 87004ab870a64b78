"""Ticket resolution request/response schemas."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from helpdesk.binding import body_int, body_optional_str, query_int, query_str
from helpdesk.models.itsm import TicketResolution
from helpdesk.responses import (
    PaginationQuery,
    format_timestamp,
    map_responses,
    parse_date,
)
from helpdesk.validators import Validator, validate_positive_id, validate_string

NOTE_MAX = 5000


@dataclass
class CreateTicketResolutionRequest:
    ticket_id: int | None = None
    resolved_by: int | None = None
    resolution_note: str | None = None

    @classmethod
    def from_json(
        cls, payload: Mapping[str, Any]
    ) -> "CreateTicketResolutionRequest":
        return cls(
            ticket_id=body_int(payload, "ticketId"),
            resolved_by=body_int(payload, "resolvedBy"),
            resolution_note=body_optional_str(payload, "resolutionNote"),
        )

    def validate(self) -> None:
        v = Validator()
        validate_positive_id(v, "ticketId", self.ticket_id)
        validate_positive_id(v, "resolvedBy", self.resolved_by)
        if self.resolution_note is not None:
            validate_string(
                v, "resolutionNote", self.resolution_note.strip(), False, 0, NOTE_MAX
            )
        v.raise_if_invalid()


@dataclass
class UpdateTicketResolutionRequest:
    resolution_note: str | None = None

    @classmethod
    def from_json(
        cls, payload: Mapping[str, Any]
    ) -> "UpdateTicketResolutionRequest":
        return cls(resolution_note=body_optional_str(payload, "resolutionNote"))

    def validate(self) -> None:
        v = Validator()
        if self.resolution_note is not None:
            validate_string(
                v, "resolutionNote", self.resolution_note.strip(), False, 0, NOTE_MAX
            )
        v.raise_if_invalid()


@dataclass
class TicketResolutionListFilter:
    page: int
    limit: int
    offset: int
    ticket_id: int = 0
    resolved_by: int = 0
    created_at: date | None = None


@dataclass
class GetTicketResolutionsQuery(PaginationQuery):
    ticket_id: int = 0
    resolved_by: int = 0
    created_at: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "GetTicketResolutionsQuery":
        return cls(
            page=query_int(args, "page"),
            limit=query_int(args, "limit"),
            ticket_id=query_int(args, "ticketId"),
            resolved_by=query_int(args, "resolvedBy"),
            created_at=query_str(args, "createdAt"),
        )

    def normalize(self) -> TicketResolutionListFilter:
        page, limit, offset = self.normalize_pagination()
        return TicketResolutionListFilter(
            page=page,
            limit=limit,
            offset=offset,
            ticket_id=self.ticket_id,
            resolved_by=self.resolved_by,
            created_at=parse_date(self.created_at),
        )


def to_ticket_resolution_response(resolution: TicketResolution) -> dict[str, Any]:
    return {
        "id": resolution.id,
        "ticketId": resolution.ticket_id,
        "resolvedBy": resolution.resolved_by,
        "resolutionNote": resolution.resolution_note,
        "createdAt": format_timestamp(resolution.created_at),
    }


def to_ticket_resolution_responses(
    resolutions: list[TicketResolution],
) -> list[dict[str, Any]]:
    return map_responses(resolutions, to_ticket_resolution_response)
