"""Ticket resolution service: one resolution record per ticket."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from helpdesk.errors import (
    ValidationError,
    already_exists,
    bad_request,
    internal,
    not_found,
)
from helpdesk.repositories import DuplicateRecordError, ticket_resolution_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.ticket_resolution import (
    CreateTicketResolutionRequest,
    GetTicketResolutionsQuery,
    UpdateTicketResolutionRequest,
    to_ticket_resolution_response,
    to_ticket_resolution_responses,
)
from helpdesk.services import ticket_service, user_service

logger = logging.getLogger(__name__)


def _check_id(resolution_id: int) -> None:
    if resolution_id <= 0:
        raise bad_request("Invalid ticket resolution ID")


def _clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    return note.strip() or None


# -- Queries ---------------------------------------------------------------


def get_all(query: GetTicketResolutionsQuery | None = None) -> ListResponse[dict]:
    if query is None:
        query = GetTicketResolutionsQuery()
    list_filter = query.normalize()

    try:
        resolutions, total_items = ticket_resolution_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get ticket resolutions")
        raise internal("Failed to retrieve ticket resolutions") from exc

    return build_list_response(
        to_ticket_resolution_responses(resolutions),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(resolution_id: int) -> dict:
    _check_id(resolution_id)

    try:
        resolution = ticket_resolution_repository.get_by_id(resolution_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get ticket resolution %d", resolution_id)
        raise internal("Failed to retrieve ticket resolution") from exc

    if resolution is None:
        raise not_found("Ticket resolution")
    return to_ticket_resolution_response(resolution)


def get_by_ticket_id(ticket_id: int) -> dict:
    """
    Return the resolution recorded for a ticket.

    Raises:
        NotFoundError: ``Ticket not found`` or ``Ticket resolution not found``.
    """
    if ticket_id <= 0:
        raise bad_request("Invalid ticket ID")
    ticket_service.ensure_exists(ticket_id)

    try:
        resolution = ticket_resolution_repository.get_by_ticket_id(ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get resolution for ticket %d", ticket_id)
        raise internal("Failed to retrieve ticket resolution") from exc

    if resolution is None:
        raise not_found("Ticket resolution")
    return to_ticket_resolution_response(resolution)


# -- Commands --------------------------------------------------------------


def create(request: CreateTicketResolutionRequest) -> dict:
    """
    Record how a ticket was resolved.

    Raises:
        NotFoundError:      If the ticket or resolving user is missing.
        ValidationError:    On invalid input or an inactive user.
        AlreadyExistsError: If the ticket already has a resolution.
    """
    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Ticket resolution validation failed: %s", exc.details)
        raise

    ticket_service.ensure_exists(request.ticket_id)
    user_service.validate_for_assignment(request.resolved_by, "resolvedBy")

    try:
        existing = ticket_resolution_repository.get_by_ticket_id(request.ticket_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to check existing resolution")
        raise internal("Failed to create ticket resolution") from exc
    if existing is not None:
        raise already_exists("Ticket resolution")

    try:
        resolution = ticket_resolution_repository.create(
            request.ticket_id,
            request.resolved_by,
            _clean_note(request.resolution_note),
        )
    except DuplicateRecordError as exc:
        logger.warning("Duplicate resolution on insert: %s", exc)
        raise already_exists("Ticket resolution") from exc
    except SQLAlchemyError as exc:
        logger.exception(
            "Failed to create resolution for ticket %d", request.ticket_id
        )
        raise internal("Failed to create ticket resolution") from exc

    logger.info(
        "Created resolution %d for ticket %d", resolution.id, resolution.ticket_id
    )
    return to_ticket_resolution_response(resolution)


def update(resolution_id: int, request: UpdateTicketResolutionRequest) -> dict:
    _check_id(resolution_id)

    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Ticket resolution validation failed: %s", exc.details)
        raise

    try:
        resolution = ticket_resolution_repository.update(
            resolution_id, _clean_note(request.resolution_note)
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to update ticket resolution %d", resolution_id)
        raise internal("Failed to update ticket resolution") from exc

    if resolution is None:
        raise not_found("Ticket resolution")

    logger.info("Updated ticket resolution %d", resolution_id)
    return to_ticket_resolution_response(resolution)


def delete(resolution_id: int) -> None:
    _check_id(resolution_id)

    try:
        removed = ticket_resolution_repository.delete(resolution_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete ticket resolution %d", resolution_id)
        raise internal("Failed to delete ticket resolution") from exc

    if not removed:
        raise not_found("Ticket resolution")

    logger.info("Deleted ticket resolution %d", resolution_id)
