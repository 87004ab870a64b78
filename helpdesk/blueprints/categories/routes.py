"""
Routes for the categories blueprint.

    GET    /categories
    GET    /categories/<id>
    POST   /categories
    PATCH  /categories/<id>
    DELETE /categories/<id>
"""

from flask import request

from helpdesk.binding import json_body, parse_id
from helpdesk.blueprints.categories import bp
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.category import (
    CreateCategoryRequest,
    GetCategoriesQuery,
    UpdateCategoryRequest,
)
from helpdesk.services import category_service


@bp.route("/categories", methods=["GET"])
def list_categories():
    query = GetCategoriesQuery.from_args(request.args)
    result = category_service.get_all(query)
    return ok("Categories retrieved successfully", result)


@bp.route("/categories/<category_id>", methods=["GET"])
def get_category(category_id):
    category = category_service.get_by_id(parse_id(category_id, "category"))
    return ok("Category retrieved successfully", category)


@bp.route("/categories", methods=["POST"])
def create_category():
    payload = CreateCategoryRequest.from_json(json_body())
    category = category_service.create(payload)
    return created("Category created successfully", category)


@bp.route("/categories/<category_id>", methods=["PATCH"])
def update_category(category_id):
    category_id = parse_id(category_id, "category")
    payload = UpdateCategoryRequest.from_json(json_body())
    category = category_service.update(category_id, payload)
    return ok("Category updated successfully", category)


@bp.route("/categories/<category_id>", methods=["DELETE"])
def delete_category(category_id):
    category_service.delete(parse_id(category_id, "category"))
    return deleted("Category deleted successfully")
