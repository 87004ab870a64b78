"""
Routes for the tickets blueprint.

    GET    /tickets
    GET    /tickets/<id>
    POST   /tickets
    PATCH  /tickets/<id>
    DELETE /tickets/<id>
    GET    /tickets/<id>/resolution
"""

from flask import request

from helpdesk.binding import json_body, parse_id
from helpdesk.blueprints.tickets import bp
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.ticket import (
    CreateTicketRequest,
    GetTicketsQuery,
    UpdateTicketRequest,
)
from helpdesk.services import ticket_resolution_service, ticket_service


@bp.route("/tickets", methods=["GET"])
def list_tickets():
    """
    Paginated ticket list.

    Filters: title, status, priority, categoryId, createdBy, assignedTo,
    createdAt (YYYY-MM-DD).
    """
    query = GetTicketsQuery.from_args(request.args)
    return ok("Tickets retrieved successfully", ticket_service.get_all(query))


@bp.route("/tickets/<ticket_id>", methods=["GET"])
def get_ticket(ticket_id):
    ticket = ticket_service.get_by_id(parse_id(ticket_id, "ticket"))
    return ok("Ticket retrieved successfully", ticket)


@bp.route("/tickets", methods=["POST"])
def create_ticket():
    payload = CreateTicketRequest.from_json(json_body())
    ticket = ticket_service.create(payload)
    return created("Ticket created successfully", ticket)


@bp.route("/tickets/<ticket_id>", methods=["PATCH"])
def update_ticket(ticket_id):
    ticket_id = parse_id(ticket_id, "ticket")
    payload = UpdateTicketRequest.from_json(json_body())
    ticket = ticket_service.update(ticket_id, payload)
    return ok("Ticket updated successfully", ticket)


@bp.route("/tickets/<ticket_id>", methods=["DELETE"])
def delete_ticket(ticket_id):
    ticket_service.delete(parse_id(ticket_id, "ticket"))
    return deleted("Ticket deleted successfully")


@bp.route("/tickets/<ticket_id>/resolution", methods=["GET"])
def get_ticket_resolution(ticket_id):
    resolution = ticket_resolution_service.get_by_ticket_id(
        parse_id(ticket_id, "ticket")
    )
    return ok("Ticket resolution retrieved successfully", resolution)
