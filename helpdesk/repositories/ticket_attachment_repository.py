"""
Ticket attachment repository: SQL access for ``ticket_attachments``.
"""

from helpdesk.extensions import db
from helpdesk.models.itsm import TicketAttachment
from helpdesk.repositories import fetch_page, write_transaction
from helpdesk.schemas.ticket_attachment import TicketAttachmentListFilter


def get_all(
    list_filter: TicketAttachmentListFilter,
) -> tuple[list[TicketAttachment], int]:
    query = TicketAttachment.query.filter(
        TicketAttachment.ticket_id == list_filter.ticket_id
    )
    if list_filter.type:
        query = query.filter(TicketAttachment.type == list_filter.type)

    return fetch_page(
        query,
        (TicketAttachment.created_at.desc(), TicketAttachment.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )


def get_by_id(attachment_id: int) -> TicketAttachment | None:
    return db.session.get(TicketAttachment, attachment_id)


def create(
    ticket_id: int, uploaded_by: int, file_url: str, attachment_type: str
) -> TicketAttachment:
    attachment = TicketAttachment(
        ticket_id=ticket_id,
        uploaded_by=uploaded_by,
        file_url=file_url,
        type=attachment_type,
    )
    with write_transaction():
        db.session.add(attachment)
    return attachment


def delete(attachment_id: int) -> bool:
    with write_transaction():
        removed = TicketAttachment.query.filter(
            TicketAttachment.id == attachment_id
        ).delete(synchronize_session="fetch")
    return removed > 0
