"""Ticket attachment request/response schemas."""

from dataclasses import dataclass
from typing import Any, Mapping

from helpdesk.binding import query_int, query_str
from helpdesk.models.itsm import TicketAttachment
from helpdesk.responses import PaginationQuery, format_timestamp, map_responses
from helpdesk.schemas.user import public_url


@dataclass
class TicketAttachmentListFilter:
    page: int
    limit: int
    offset: int
    ticket_id: int = 0
    type: str = ""


@dataclass
class GetTicketAttachmentsQuery(PaginationQuery):
    type: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "GetTicketAttachmentsQuery":
        return cls(
            page=query_int(args, "page"),
            limit=query_int(args, "limit"),
            type=query_str(args, "type"),
        )

    def normalize(self, ticket_id: int) -> TicketAttachmentListFilter:
        page, limit, offset = self.normalize_pagination()
        return TicketAttachmentListFilter(
            page=page,
            limit=limit,
            offset=offset,
            ticket_id=ticket_id,
            type=self.type.strip().upper(),
        )


def to_ticket_attachment_response(
    attachment: TicketAttachment, base_url: str = ""
) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "ticketId": attachment.ticket_id,
        "uploadedBy": attachment.uploaded_by,
        "fileUrl": public_url(attachment.file_url, base_url),
        "type": attachment.type,
        "createdAt": format_timestamp(attachment.created_at),
    }


def to_ticket_attachment_responses(
    attachments: list[TicketAttachment], base_url: str = ""
) -> list[dict[str, Any]]:
    return map_responses(
        attachments, lambda item: to_ticket_attachment_response(item, base_url)
    )
