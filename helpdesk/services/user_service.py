"""
User service: account management, password hashing and avatars.

Passwords are stored as bcrypt hashes; the cost factor comes from the
``BCRYPT_ROUNDS`` config value so tests can use a cheap one.  Avatar
files are written by the route before the row is updated, and the
previous file is removed only after the update commits.
"""

import logging

import bcrypt
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from helpdesk import uploads
from helpdesk.errors import (
    ValidationError,
    already_exists,
    bad_request,
    conflict,
    internal,
    not_found,
    validation,
)
from helpdesk.repositories import DuplicateRecordError, user_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.user import (
    CreateUserRequest,
    GetUsersQuery,
    UpdateUserRequest,
    to_user_response,
    to_user_responses,
)
from helpdesk.services import division_service

logger = logging.getLogger(__name__)


def _base_url() -> str:
    return current_app.config.get("BASE_URL", "")


def _check_id(user_id: int) -> None:
    if user_id <= 0:
        raise bad_request("Invalid user ID")


def _clean_phone(phone: str | None) -> str | None:
    if phone is None:
        return None
    return phone.strip() or None


# -- Passwords -------------------------------------------------------------


def hash_password(password: str) -> str:
    """Return a bcrypt hash of ``password`` as text."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password_hash: str, password: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Malformed hashes and over-long passwords simply fail verification.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# -- Queries ---------------------------------------------------------------


def get_all(query: GetUsersQuery | None = None) -> ListResponse[dict]:
    if query is None:
        query = GetUsersQuery()
    list_filter = query.normalize()

    try:
        users, total_items = user_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get users")
        raise internal("Failed to retrieve users") from exc

    return build_list_response(
        to_user_responses(users, _base_url()),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(user_id: int) -> dict:
    _check_id(user_id)

    try:
        user = user_repository.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get user %d", user_id)
        raise internal("Failed to retrieve user") from exc

    if user is None:
        raise not_found("User")
    return to_user_response(user, _base_url())


def validate_for_assignment(user_id: int, field: str) -> None:
    """
    Ensure a user exists and is active before a ticket row points at it.

    Args:
        user_id: The referenced user.
        field:   Request field reported in the validation details.

    Raises:
        NotFoundError:   If the user does not exist.
        ValidationError: If the user is inactive.
    """
    try:
        user = user_repository.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get user %d", user_id)
        raise internal("Failed to validate user") from exc

    if user is None:
        raise not_found("User")
    if not user.is_active:
        raise validation("Validation failed").with_details(
            {field: "User is not active"}
        )


# -- Commands --------------------------------------------------------------


def create(request: CreateUserRequest) -> dict:
    """
    Register a user in an active division.

    The email is stored lowercased and must be unique ignoring case.

    Raises:
        ValidationError:    If a field is invalid or the division is inactive.
        NotFoundError:      If the division does not exist.
        AlreadyExistsError: If the email is already registered.
    """
    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("User validation failed: %s", exc.details)
        raise

    email = request.email.strip().lower()
    division_service.validate_for_assignment(request.division_id)

    try:
        existing = user_repository.get_by_email(email)
    except SQLAlchemyError as exc:
        logger.exception("Failed to check existing user")
        raise internal("Failed to create user") from exc
    if existing is not None:
        raise already_exists("User with this email")

    password_hash = hash_password(request.password)

    try:
        user = user_repository.create(
            name=request.name.strip(),
            email=email,
            password_hash=password_hash,
            phone=_clean_phone(request.phone),
            role=request.role.strip(),
            division_id=request.division_id,
        )
    except DuplicateRecordError as exc:
        logger.warning("Duplicate user on insert: %s", exc)
        raise already_exists("User with this email") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to create user %s", email)
        raise internal("Failed to create user") from exc

    logger.info("Created user %d (%s, role=%s)", user.id, user.email, user.role)
    return to_user_response(user, _base_url())


def update(user_id: int, request: UpdateUserRequest) -> dict:
    _check_id(user_id)

    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("User validation failed: %s", exc.details)
        raise

    try:
        current = user_repository.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load user %d", user_id)
        raise internal("Failed to update user") from exc
    if current is None:
        raise not_found("User")

    division_service.validate_for_assignment(request.division_id)

    is_active = current.is_active if request.is_active is None else request.is_active

    try:
        user = user_repository.update(
            user_id,
            name=request.name.strip(),
            phone=_clean_phone(request.phone),
            role=request.role.strip(),
            division_id=request.division_id,
            is_active=is_active,
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to update user %d", user_id)
        raise internal("Failed to update user") from exc

    if user is None:
        raise not_found("User")

    logger.info("Updated user %d", user_id)
    return to_user_response(user, _base_url())


def update_avatar(user_id: int, avatar_url: str) -> dict:
    """
    Point a user at a newly stored avatar and remove the previous file.

    The caller owns ``avatar_url`` until this returns: if an error is
    raised the new file has not been referenced and should be deleted.
    """
    _check_id(user_id)

    try:
        current = user_repository.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load user %d", user_id)
        raise internal("Failed to update user avatar") from exc
    if current is None:
        raise not_found("User")

    old_avatar = current.avatar_url

    try:
        user = user_repository.update_avatar(user_id, avatar_url)
    except SQLAlchemyError as exc:
        logger.exception("Failed to update avatar for user %d", user_id)
        raise internal("Failed to update user avatar") from exc
    if user is None:
        raise not_found("User")

    if old_avatar and old_avatar != avatar_url:
        try:
            uploads.delete_file(old_avatar)
        except OSError as exc:
            logger.warning("Could not delete old avatar %s: %s", old_avatar, exc)

    logger.info("Updated avatar for user %d", user_id)
    return to_user_response(user, _base_url())


def delete(user_id: int) -> None:
    """
    Delete a user and their avatar file.

    Raises:
        NotFoundError: If the user does not exist.
        ConflictError: If tickets, resolutions or attachments reference the user.
    """
    _check_id(user_id)

    try:
        user = user_repository.get_by_id(user_id)
        if user is None:
            raise not_found("User")
        if user_repository.is_referenced(user_id):
            raise conflict("User is still referenced by tickets")
        avatar_url = user.avatar_url
        removed = user_repository.delete(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete user %d", user_id)
        raise internal("Failed to delete user") from exc

    if not removed:
        raise not_found("User")

    if avatar_url:
        try:
            uploads.delete_file(avatar_url)
        except OSError as exc:
            logger.warning("Could not delete avatar %s: %s", avatar_url, exc)

    logger.info("Deleted user %d", user_id)
