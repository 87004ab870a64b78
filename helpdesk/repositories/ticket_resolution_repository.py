"""
Ticket resolution repository: SQL access for ``ticket_resolutions``.
"""

from helpdesk.extensions import db
from helpdesk.models.itsm import TicketResolution
from helpdesk.repositories import fetch_page, write_transaction
from helpdesk.schemas.ticket_resolution import TicketResolutionListFilter


def get_all(
    list_filter: TicketResolutionListFilter,
) -> tuple[list[TicketResolution], int]:
    query = TicketResolution.query

    if list_filter.ticket_id > 0:
        query = query.filter(TicketResolution.ticket_id == list_filter.ticket_id)
    if list_filter.resolved_by > 0:
        query = query.filter(TicketResolution.resolved_by == list_filter.resolved_by)
    if list_filter.created_at is not None:
        query = query.filter(
            db.func.date(TicketResolution.created_at, type_=db.Date)
            == list_filter.created_at
        )

    return fetch_page(
        query,
        (TicketResolution.created_at.desc(), TicketResolution.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )


def get_by_id(resolution_id: int) -> TicketResolution | None:
    return db.session.get(TicketResolution, resolution_id)


def get_by_ticket_id(ticket_id: int) -> TicketResolution | None:
    return TicketResolution.query.filter_by(ticket_id=ticket_id).first()


def create(
    ticket_id: int, resolved_by: int, resolution_note: str | None
) -> TicketResolution:
    resolution = TicketResolution(
        ticket_id=ticket_id,
        resolved_by=resolved_by,
        resolution_note=resolution_note,
    )
    with write_transaction(f"resolution for ticket {ticket_id} already exists"):
        db.session.add(resolution)
    return resolution


def update(resolution_id: int, resolution_note: str | None) -> TicketResolution | None:
    resolution = get_by_id(resolution_id)
    if resolution is None:
        return None
    with write_transaction():
        resolution.resolution_note = resolution_note
    return resolution


def delete(resolution_id: int) -> bool:
    with write_transaction():
        removed = TicketResolution.query.filter(
            TicketResolution.id == resolution_id
        ).delete(synchronize_session="fetch")
    return removed > 0
