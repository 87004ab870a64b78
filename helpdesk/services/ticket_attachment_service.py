"""
Ticket attachment service.

The route stores the uploaded file first and hands its URL to
``create``; when ``create`` raises, the route removes the file again so
no orphan is left in the upload folder.
"""

import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from helpdesk import uploads
from helpdesk.errors import bad_request, internal, not_found, validation
from helpdesk.models.itsm import (
    ATTACHMENT_FILE,
    ATTACHMENT_IMAGE,
    VALID_ATTACHMENT_TYPES,
)
from helpdesk.repositories import ticket_attachment_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.ticket_attachment import (
    GetTicketAttachmentsQuery,
    to_ticket_attachment_response,
    to_ticket_attachment_responses,
)
from helpdesk.services import ticket_service, user_service

logger = logging.getLogger(__name__)


def _base_url() -> str:
    return current_app.config.get("BASE_URL", "")


def _check_id(attachment_id: int) -> None:
    if attachment_id <= 0:
        raise bad_request("Invalid ticket attachment ID")


def attachment_type_for(filename: str | None) -> str:
    """Images become ``IMAGE`` attachments, everything else ``FILE``."""
    return ATTACHMENT_IMAGE if uploads.is_image(filename) else ATTACHMENT_FILE


# -- Queries ---------------------------------------------------------------


def get_all(
    ticket_id: int, query: GetTicketAttachmentsQuery | None = None
) -> ListResponse[dict]:
    """List one ticket's attachments, optionally filtered by type."""
    if ticket_id <= 0:
        raise bad_request("Invalid ticket ID")
    if query is None:
        query = GetTicketAttachmentsQuery()
    list_filter = query.normalize(ticket_id)

    if list_filter.type and list_filter.type not in VALID_ATTACHMENT_TYPES:
        raise validation("Validation failed").with_details(
            {"type": f"Must be one of: {', '.join(VALID_ATTACHMENT_TYPES)}"}
        )

    ticket_service.ensure_exists(ticket_id)

    try:
        attachments, total_items = ticket_attachment_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get attachments for ticket %d", ticket_id)
        raise internal("Failed to retrieve ticket attachments") from exc

    return build_list_response(
        to_ticket_attachment_responses(attachments, _base_url()),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(attachment_id: int) -> dict:
    _check_id(attachment_id)

    try:
        attachment = ticket_attachment_repository.get_by_id(attachment_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get ticket attachment %d", attachment_id)
        raise internal("Failed to retrieve ticket attachment") from exc

    if attachment is None:
        raise not_found("Ticket attachment")
    return to_ticket_attachment_response(attachment, _base_url())


# -- Commands --------------------------------------------------------------


def validate_upload(ticket_id: int, uploaded_by: int | None) -> None:
    """
    Check the ticket and uploader before any file is written.

    Raises:
        BadRequestError: If the ticket id is not positive.
        ValidationError: If ``uploadedBy`` is missing or the user is inactive.
        NotFoundError:   If the ticket or user does not exist.
    """
    if ticket_id <= 0:
        raise bad_request("Invalid ticket ID")
    if uploaded_by is None or uploaded_by <= 0:
        raise validation("Validation failed").with_details(
            {"uploadedBy": "Required and must be greater than 0"}
        )
    ticket_service.ensure_exists(ticket_id)
    user_service.validate_for_assignment(uploaded_by, "uploadedBy")


def create(
    ticket_id: int, uploaded_by: int, file_url: str, attachment_type: str
) -> dict:
    """
    Insert the attachment row for an already stored file.

    Args:
        ticket_id:       Ticket the file belongs to.
        uploaded_by:     Uploading user.
        file_url:        Public URL returned by ``uploads``.
        attachment_type: ``IMAGE`` or ``FILE``.
    """
    validate_upload(ticket_id, uploaded_by)

    try:
        attachment = ticket_attachment_repository.create(
            ticket_id, uploaded_by, file_url, attachment_type
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to create attachment for ticket %d", ticket_id)
        raise internal("Failed to create ticket attachment") from exc

    logger.info(
        "Attached %s %s to ticket %d", attachment_type, file_url, ticket_id
    )
    return to_ticket_attachment_response(attachment, _base_url())


def delete(attachment_id: int) -> None:
    """Delete an attachment row and then its file."""
    _check_id(attachment_id)

    try:
        attachment = ticket_attachment_repository.get_by_id(attachment_id)
        if attachment is None:
            raise not_found("Ticket attachment")
        file_url = attachment.file_url
        removed = ticket_attachment_repository.delete(attachment_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete ticket attachment %d", attachment_id)
        raise internal("Failed to delete ticket attachment") from exc

    if not removed:
        raise not_found("Ticket attachment")

    try:
        uploads.delete_file(file_url)
    except OSError as exc:
        logger.warning("Could not delete attachment file %s: %s", file_url, exc)

    logger.info("Deleted ticket attachment %d", attachment_id)
