"""
Routes for the ticket resolutions blueprint.
"""

from flask import request

from helpdesk.binding import json_body, parse_id
from helpdesk.blueprints.ticket_resolutions import bp
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.ticket_resolution import (
    CreateTicketResolutionRequest,
    GetTicketResolutionsQuery,
    UpdateTicketResolutionRequest,
)
from helpdesk.services import ticket_resolution_service


@bp.route("/ticket-resolutions", methods=["GET"])
def list_ticket_resolutions():
    query = GetTicketResolutionsQuery.from_args(request.args)
    result = ticket_resolution_service.get_all(query)
    return ok("Ticket resolutions retrieved successfully", result)


@bp.route("/ticket-resolutions/<resolution_id>", methods=["GET"])
def get_ticket_resolution(resolution_id):
    resolution = ticket_resolution_service.get_by_id(
        parse_id(resolution_id, "ticket resolution")
    )
    return ok("Ticket resolution retrieved successfully", resolution)


@bp.route("/ticket-resolutions", methods=["POST"])
def create_ticket_resolution():
    payload = CreateTicketResolutionRequest.from_json(json_body())
    resolution = ticket_resolution_service.create(payload)
    return created("Ticket resolution created successfully", resolution)


@bp.route("/ticket-resolutions/<resolution_id>", methods=["PATCH"])
def update_ticket_resolution(resolution_id):
    resolution_id = parse_id(resolution_id, "ticket resolution")
    payload = UpdateTicketResolutionRequest.from_json(json_body())
    resolution = ticket_resolution_service.update(resolution_id, payload)
    return ok("Ticket resolution updated successfully", resolution)


@bp.route("/ticket-resolutions/<resolution_id>", methods=["DELETE"])
def delete_ticket_resolution(resolution_id):
    ticket_resolution_service.delete(parse_id(resolution_id, "ticket resolution"))
    return deleted("Ticket resolution deleted successfully")
