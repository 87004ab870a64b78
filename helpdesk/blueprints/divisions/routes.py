"""
Routes for the divisions blueprint.

    GET    /divisions
    GET    /divisions/<id>
    POST   /divisions
    PATCH  /divisions/<id>
    DELETE /divisions/<id>
"""

from flask import request

from helpdesk.binding import json_body, parse_id
from helpdesk.blueprints.divisions import bp
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.division import (
    CreateDivisionRequest,
    GetDivisionsQuery,
    UpdateDivisionRequest,
)
from helpdesk.services import division_service


@bp.route("/divisions", methods=["GET"])
def list_divisions():
    """Paginated division list filtered by name, isActive and createdAt."""
    query = GetDivisionsQuery.from_args(request.args)
    result = division_service.get_all(query)
    return ok("Divisions retrieved successfully", result)


@bp.route("/divisions/<division_id>", methods=["GET"])
def get_division(division_id):
    division = division_service.get_by_id(parse_id(division_id, "division"))
    return ok("Division retrieved successfully", division)


@bp.route("/divisions", methods=["POST"])
def create_division():
    payload = CreateDivisionRequest.from_json(json_body())
    division = division_service.create(payload)
    return created("Division created successfully", division)


@bp.route("/divisions/<division_id>", methods=["PATCH"])
def update_division(division_id):
    division_id = parse_id(division_id, "division")
    payload = UpdateDivisionRequest.from_json(json_body())
    division = division_service.update(division_id, payload)
    return ok("Division updated successfully", division)


@bp.route("/divisions/<division_id>", methods=["DELETE"])
def delete_division(division_id):
    division_service.delete(parse_id(division_id, "division"))
    return deleted("Division deleted successfully")
