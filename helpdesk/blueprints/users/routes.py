"""
Routes for the users blueprint.

The avatar endpoint takes ``multipart/form-data`` with an ``avatar``
file; everything else is JSON.
"""

import logging

from flask import request

from helpdesk import uploads
from helpdesk.binding import json_body, parse_id
from helpdesk.blueprints.users import bp
from helpdesk.errors import bad_request
from helpdesk.responses import created, deleted, ok
from helpdesk.schemas.user import CreateUserRequest, GetUsersQuery, UpdateUserRequest
from helpdesk.services import user_service

logger = logging.getLogger(__name__)


@bp.route("/users", methods=["GET"])
def list_users():
    """Paginated user list filtered by name, role, divisionId and isActive."""
    query = GetUsersQuery.from_args(request.args)
    return ok("Users retrieved successfully", user_service.get_all(query))


@bp.route("/users/<user_id>", methods=["GET"])
def get_user(user_id):
    user = user_service.get_by_id(parse_id(user_id, "user"))
    return ok("User retrieved successfully", user)


@bp.route("/users", methods=["POST"])
def create_user():
    payload = CreateUserRequest.from_json(json_body())
    user = user_service.create(payload)
    return created("User created successfully", user)


@bp.route("/users/<user_id>", methods=["PATCH"])
def update_user(user_id):
    user_id = parse_id(user_id, "user")
    payload = UpdateUserRequest.from_json(json_body())
    user = user_service.update(user_id, payload)
    return ok("User updated successfully", user)


@bp.route("/users/<user_id>/avatar", methods=["PATCH"])
def update_user_avatar(user_id):
    """
    Replace a user's avatar.

    The new image is stored first; if the user update fails the stored
    file is removed again before the error propagates.
    """
    user_id = parse_id(user_id, "user")

    avatar = request.files.get("avatar")
    if avatar is None or not avatar.filename:
        raise bad_request("Avatar file is required")

    avatar_url = uploads.save_avatar_image(avatar)
    try:
        user = user_service.update_avatar(user_id, avatar_url)
    except Exception:
        try:
            uploads.delete_file(avatar_url)
        except OSError as exc:
            logger.warning("Could not remove unused avatar %s: %s", avatar_url, exc)
        raise

    return ok("User avatar updated successfully", user)


@bp.route("/users/<user_id>", methods=["DELETE"])
def delete_user(user_id):
    user_service.delete(parse_id(user_id, "user"))
    return deleted("User deleted successfully")
