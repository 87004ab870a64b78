"""
Ticket repository: SQL access for the ``tickets`` table.

Deleting a ticket goes through the ORM so its resolution and
attachments are removed with it.
"""

from helpdesk.extensions import db
from helpdesk.models.itsm import Ticket
from helpdesk.repositories import fetch_page, row_exists, write_transaction
from helpdesk.schemas.ticket import TicketListFilter


def get_all(list_filter: TicketListFilter) -> tuple[list[Ticket], int]:
    """Return one page of tickets matching the filter plus the total count."""
    query = Ticket.query

    if list_filter.title:
        query = query.filter(Ticket.title.ilike(f"%{list_filter.title}%"))
    if list_filter.status:
        query = query.filter(Ticket.status == list_filter.status)
    if list_filter.priority:
        query = query.filter(Ticket.priority == list_filter.priority)
    if list_filter.category_id > 0:
        query = query.filter(Ticket.category_id == list_filter.category_id)
    if list_filter.created_by > 0:
        query = query.filter(Ticket.created_by == list_filter.created_by)
    if list_filter.assigned_to > 0:
        query = query.filter(Ticket.assigned_to == list_filter.assigned_to)
    if list_filter.created_at is not None:
        query = query.filter(
            db.func.date(Ticket.created_at, type_=db.Date) == list_filter.created_at
        )

    return fetch_page(
        query,
        (Ticket.created_at.desc(), Ticket.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )


def get_by_id(ticket_id: int) -> Ticket | None:
    return db.session.get(Ticket, ticket_id)


def exists(ticket_id: int) -> bool:
    return row_exists(Ticket, ticket_id)


def create(
    title: str,
    description: str,
    category_id: int,
    priority: str,
    status: str,
    created_by: int,
    assigned_to: int | None,
) -> Ticket:
    ticket = Ticket(
        title=title,
        description=description,
        category_id=category_id,
        priority=priority,
        status=status,
        created_by=created_by,
        assigned_to=assigned_to,
    )
    with write_transaction():
        db.session.add(ticket)
    return ticket


def update(ticket_id: int, changes: dict) -> Ticket | None:
    """
    Apply column changes to a ticket.

    Args:
        ticket_id: The ticket to update.
        changes:   Mapping of column attribute name -> new value.
    """
    ticket = get_by_id(ticket_id)
    if ticket is None:
        return None
    with write_transaction():
        for column, value in changes.items():
            setattr(ticket, column, value)
    return ticket


def delete(ticket_id: int) -> list[str] | None:
    """
    Delete a ticket together with its resolution and attachments.

    Returns:
        The file URLs of the removed attachments, or None when the
        ticket does not exist.
    """
    ticket = get_by_id(ticket_id)
    if ticket is None:
        return None
    file_urls = [attachment.file_url for attachment in ticket.attachments]
    with write_transaction():
        db.session.delete(ticket)
    return file_urls
