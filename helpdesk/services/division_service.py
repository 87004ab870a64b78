"""
Division service: validation and business rules for divisions.

Repository failures are logged here and surfaced to the client as a
generic internal error; validation, not-found and duplicate conditions
become the matching ``AppError``.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from helpdesk.errors import (
    ValidationError,
    already_exists,
    bad_request,
    conflict,
    internal,
    not_found,
    validation,
)
from helpdesk.repositories import DuplicateRecordError, division_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.division import (
    CreateDivisionRequest,
    GetDivisionsQuery,
    UpdateDivisionRequest,
    to_division_response,
    to_division_responses,
)

logger = logging.getLogger(__name__)


def _check_id(division_id: int) -> None:
    if division_id <= 0:
        raise bad_request("Invalid division ID")


# -- Queries ---------------------------------------------------------------


def get_all(query: GetDivisionsQuery | None = None) -> ListResponse[dict]:
    """
    Return one page of divisions.

    Args:
        query: Raw query-string values; defaults apply when omitted.

    Returns:
        A ``ListResponse`` of division response dicts.
    """
    if query is None:
        query = GetDivisionsQuery()
    list_filter = query.normalize()

    try:
        divisions, total_items = division_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get divisions")
        raise internal("Failed to retrieve divisions") from exc

    return build_list_response(
        to_division_responses(divisions),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(division_id: int) -> dict:
    _check_id(division_id)

    try:
        division = division_repository.get_by_id(division_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get division %d", division_id)
        raise internal("Failed to retrieve division") from exc

    if division is None:
        raise not_found("Division")
    return to_division_response(division)


def validate_for_assignment(division_id: int) -> None:
    """
    Ensure a division can have users assigned to it.

    Raises:
        NotFoundError:   If the division does not exist.
        ValidationError: If the division is inactive.
    """
    try:
        division = division_repository.get_by_id(division_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get division %d", division_id)
        raise internal("Failed to validate division") from exc

    if division is None:
        raise not_found("Division")
    if not division.is_active:
        raise validation("Validation failed").with_details(
            {"divisionId": "Division is not active"}
        )


# -- Commands --------------------------------------------------------------


def create(request: CreateDivisionRequest) -> dict:
    """
    Create a division with a unique (case-insensitive) name.

    Raises:
        ValidationError:    If the name is missing or the wrong length.
        AlreadyExistsError: If another division already uses the name.
    """
    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Division validation failed: %s", exc.details)
        raise

    name = request.name.strip()

    try:
        existing = division_repository.get_by_name(name)
    except SQLAlchemyError as exc:
        logger.exception("Failed to check existing division")
        raise internal("Failed to create division") from exc
    if existing is not None:
        raise already_exists("Division")

    try:
        division = division_repository.create(name)
    except DuplicateRecordError as exc:
        logger.warning("Duplicate division on insert: %s", exc)
        raise already_exists("Division") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to create division %s", name)
        raise internal("Failed to create division") from exc

    logger.info("Created division %d (%s)", division.id, division.name)
    return to_division_response(division)


def update(division_id: int, request: UpdateDivisionRequest) -> dict:
    """
    Rename a division and optionally toggle ``is_active``.

    An omitted ``isActive`` keeps the current value.
    """
    _check_id(division_id)

    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Division validation failed: %s", exc.details)
        raise

    name = request.name.strip()

    try:
        current = division_repository.get_by_id(division_id)
        existing = division_repository.get_by_name(name)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load division %d", division_id)
        raise internal("Failed to update division") from exc

    if current is None:
        raise not_found("Division")
    if existing is not None and existing.id != division_id:
        raise already_exists("Division with this name")

    is_active = current.is_active if request.is_active is None else request.is_active

    try:
        division = division_repository.update(division_id, name, is_active)
    except DuplicateRecordError as exc:
        raise already_exists("Division with this name") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to update division %d", division_id)
        raise internal("Failed to update division") from exc

    if division is None:
        raise not_found("Division")

    logger.info("Updated division %d (%s)", division.id, division.name)
    return to_division_response(division)


def delete(division_id: int) -> None:
    """
    Delete a division that no user belongs to.

    Raises:
        NotFoundError: If the division does not exist.
        ConflictError: If users still reference the division.
    """
    _check_id(division_id)

    try:
        if not division_repository.exists(division_id):
            raise not_found("Division")
        if division_repository.has_users(division_id):
            raise conflict("Division still has users assigned")
        removed = division_repository.delete(division_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete division %d", division_id)
        raise internal("Failed to delete division") from exc

    if not removed:
        raise not_found("Division")

    logger.info("Deleted division %d", division_id)
