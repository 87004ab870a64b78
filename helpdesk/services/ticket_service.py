"""
Ticket service: ticket lifecycle and assignment.

Status changes are only checked for membership; there are no transition
rules.  The service stamps the lifecycle timestamps:

    assigned_at   whenever the assignee changes to a user
    resolved_at   the first time the status becomes RESOLVED
    closed_at     the first time the status becomes CLOSED

Timestamps are stored as naive UTC.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from helpdesk import uploads
from helpdesk.errors import ValidationError, bad_request, internal, not_found
from helpdesk.models.itsm import STATUS_CLOSED, STATUS_OPEN, STATUS_RESOLVED
from helpdesk.repositories import ticket_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.ticket import (
    CreateTicketRequest,
    GetTicketsQuery,
    UpdateTicketRequest,
    to_ticket_response,
    to_ticket_responses,
)
from helpdesk.services import category_service, user_service

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _check_id(ticket_id: int) -> None:
    if ticket_id <= 0:
        raise bad_request("Invalid ticket ID")


# -- Queries ---------------------------------------------------------------


def get_all(query: GetTicketsQuery | None = None) -> ListResponse[dict]:
    if query is None:
        query = GetTicketsQuery()
    list_filter = query.normalize()

    try:
        tickets, total_items = ticket_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get tickets")
        raise internal("Failed to retrieve tickets") from exc

    return build_list_response(
        to_ticket_responses(tickets),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(ticket_id: int) -> dict:
    _check_id(ticket_id)

    try:
        ticket = ticket_repository.get_by_id(ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get ticket %d", ticket_id)
        raise internal("Failed to retrieve ticket") from exc

    if ticket is None:
        raise not_found("Ticket")
    return to_ticket_response(ticket)


def ensure_exists(ticket_id: int) -> None:
    """Raise ``Ticket not found`` unless the ticket exists."""
    try:
        found = ticket_repository.exists(ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to check ticket %d", ticket_id)
        raise internal("Failed to retrieve ticket") from exc
    if not found:
        raise not_found("Ticket")


# -- Commands --------------------------------------------------------------


def create(request: CreateTicketRequest) -> dict:
    """
    Open a new ticket.

    The category must be active, and the creator and optional assignee
    must be active users.  New tickets always start in ``OPEN``.

    Raises:
        ValidationError: On invalid input or an inactive reference.
        NotFoundError:   If the category or a referenced user is missing.
    """
    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Ticket validation failed: %s", exc.details)
        raise

    category_service.validate_for_assignment(request.category_id)
    user_service.validate_for_assignment(request.created_by, "createdBy")
    if request.assigned_to is not None:
        user_service.validate_for_assignment(request.assigned_to, "assignedTo")

    try:
        ticket = ticket_repository.create(
            title=request.title.strip(),
            description=request.description.strip(),
            category_id=request.category_id,
            priority=request.priority.strip(),
            status=STATUS_OPEN,
            created_by=request.created_by,
            assigned_to=request.assigned_to,
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to create ticket")
        raise internal("Failed to create ticket") from exc

    logger.info(
        "Created ticket %d (priority=%s, created_by=%d)",
        ticket.id,
        ticket.priority,
        ticket.created_by,
    )
    return to_ticket_response(ticket)


def _lifecycle_changes(ticket, request: UpdateTicketRequest, now: datetime) -> dict:
    """Work out which timestamp and assignee columns an update touches."""
    changes = {}

    if request.assigned_to_provided and request.assigned_to != ticket.assigned_to:
        changes["assigned_to"] = request.assigned_to
        if request.assigned_to is not None:
            changes["assigned_at"] = now

    status = request.status.strip()
    if status == STATUS_RESOLVED and ticket.resolved_at is None:
        changes["resolved_at"] = now
    if status == STATUS_CLOSED and ticket.closed_at is None:
        changes["closed_at"] = now

    return changes


def update(ticket_id: int, request: UpdateTicketRequest) -> dict:
    _check_id(ticket_id)

    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Ticket validation failed: %s", exc.details)
        raise

    try:
        current = ticket_repository.get_by_id(ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load ticket %d", ticket_id)
        raise internal("Failed to update ticket") from exc
    if current is None:
        raise not_found("Ticket")

    category_service.validate_for_assignment(request.category_id)
    if request.assigned_to_provided and request.assigned_to is not None:
        user_service.validate_for_assignment(request.assigned_to, "assignedTo")

    changes = {
        "title": request.title.strip(),
        "description": request.description.strip(),
        "category_id": request.category_id,
        "priority": request.priority.strip(),
        "status": request.status.strip(),
    }
    changes.update(_lifecycle_changes(current, request, _utcnow()))

    try:
        ticket = ticket_repository.update(ticket_id, changes)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update ticket %d", ticket_id)
        raise internal("Failed to update ticket") from exc

    if ticket is None:
        raise not_found("Ticket")

    logger.info("Updated ticket %d (status=%s)", ticket.id, ticket.status)
    return to_ticket_response(ticket)


def delete(ticket_id: int) -> None:
    """
    Delete a ticket, its resolution and its attachments.

    Attachment files are removed after the rows are gone; a file that
    cannot be removed is logged and left behind.
    """
    _check_id(ticket_id)

    try:
        file_urls = ticket_repository.delete(ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete ticket %d", ticket_id)
        raise internal("Failed to delete ticket") from exc

    if file_urls is None:
        raise not_found("Ticket")

    for exc in uploads.delete_files(file_urls):
        logger.warning("Could not delete attachment file: %s", exc)

    logger.info("Deleted ticket %d (%d attachments)", ticket_id, len(file_urls))
