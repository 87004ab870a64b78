"""
Routes for the ticket attachments blueprint.

Uploads are ``multipart/form-data`` with a ``file`` part and an
``uploadedBy`` form field.  Images are stored under ``image/ticket``,
documents under ``file``.
"""

import logging

from flask import request

from helpdesk import uploads
from helpdesk.binding import form_int, parse_id
from helpdesk.blueprints.ticket_attachments import bp
from helpdesk.errors import bad_request
from helpdesk.models.itsm import ATTACHMENT_IMAGE
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.ticket_attachment import GetTicketAttachmentsQuery
from helpdesk.services import ticket_attachment_service

logger = logging.getLogger(__name__)


@bp.route("/tickets/<ticket_id>/attachments", methods=["GET"])
def list_ticket_attachments(ticket_id):
    ticket_id = parse_id(ticket_id, "ticket")
    query = GetTicketAttachmentsQuery.from_args(request.args)
    result = ticket_attachment_service.get_all(ticket_id, query)
    return ok("Ticket attachments retrieved successfully", result)


@bp.route("/tickets/<ticket_id>/attachments", methods=["POST"])
def upload_ticket_attachment(ticket_id):
    """
    Store an uploaded file and attach it to the ticket.

    The ticket and uploader are checked before the file is written, and
    the file is removed again if the row cannot be inserted.
    """
    ticket_id = parse_id(ticket_id, "ticket")

    file = request.files.get("file")
    if file is None or not file.filename:
        raise bad_request("File is required")
    uploaded_by = form_int(request.form, "uploadedBy")

    ticket_attachment_service.validate_upload(ticket_id, uploaded_by)

    attachment_type = ticket_attachment_service.attachment_type_for(file.filename)
    if attachment_type == ATTACHMENT_IMAGE:
        file_url = uploads.save_ticket_image(file)
    else:
        file_url = uploads.save_document_file(file)

    try:
        attachment = ticket_attachment_service.create(
            ticket_id, uploaded_by, file_url, attachment_type
        )
    except Exception:
        try:
            uploads.delete_file(file_url)
        except OSError as exc:
            logger.warning("Could not remove orphaned upload %s: %s", file_url, exc)
        raise

    return created("Ticket attachment uploaded successfully", attachment)


@bp.route("/ticket-attachments/<attachment_id>", methods=["GET"])
def get_ticket_attachment(attachment_id):
    attachment = ticket_attachment_service.get_by_id(
        parse_id(attachment_id, "ticket attachment")
    )
    return ok("Ticket attachment retrieved successfully", attachment)


@bp.route("/ticket-attachments/<attachment_id>", methods=["DELETE"])
def delete_ticket_attachment(attachment_id):
    ticket_attachment_service.delete(parse_id(attachment_id, "ticket attachment"))
    return deleted("Ticket attachment deleted successfully")
