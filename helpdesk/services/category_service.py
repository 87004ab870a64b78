"""Category service: validation and business rules for ticket categories."""

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
from helpdesk.repositories import DuplicateRecordError, category_repository
from helpdesk.responses import ListResponse, build_list_response
from helpdesk.schemas.category import (
    CreateCategoryRequest,
    GetCategoriesQuery,
    UpdateCategoryRequest,
    to_category_response,
    to_category_responses,
)

logger = logging.getLogger(__name__)


def _check_id(category_id: int) -> None:
    if category_id <= 0:
        raise bad_request("Invalid category ID")


# -- Queries ---------------------------------------------------------------


def get_all(query: GetCategoriesQuery | None = None) -> ListResponse[dict]:
    """Return one page of categories."""
    if query is None:
        query = GetCategoriesQuery()
    list_filter = query.normalize()

    try:
        categories, total_items = category_repository.get_all(list_filter)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get categories")
        raise internal("Failed to retrieve categories") from exc

    return build_list_response(
        to_category_responses(categories),
        list_filter.page,
        list_filter.limit,
        total_items,
    )


def get_by_id(category_id: int) -> dict:
    _check_id(category_id)

    try:
        category = category_repository.get_by_id(category_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get category %d", category_id)
        raise internal("Failed to retrieve category") from exc

    if category is None:
        raise not_found("Category")
    return to_category_response(category)


def validate_for_assignment(category_id: int) -> None:
    """
    Ensure a category can be used by tickets.

    Raises:
        NotFoundError:   If the category does not exist.
        ValidationError: If the category is inactive.
    """
    try:
        category = category_repository.get_by_id(category_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get category %d", category_id)
        raise internal("Failed to validate category") from exc

    if category is None:
        raise not_found("Category")
    if not category.is_active:
        raise validation("Validation failed").with_details(
            {"categoryId": "Category is not active"}
        )


# -- Commands --------------------------------------------------------------


def create(request: CreateCategoryRequest) -> dict:
    """
    Create a category with a unique (case-insensitive) name.

    Raises:
        ValidationError:    If the name is missing or the wrong length.
        AlreadyExistsError: If another category already uses the name.
    """
    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Category validation failed: %s", exc.details)
        raise

    name = request.name.strip()

    try:
        existing = category_repository.get_by_name(name)
    except SQLAlchemyError as exc:
        logger.exception("Failed to check existing category")
        raise internal("Failed to create category") from exc
    if existing is not None:
        raise already_exists("Category")

    try:
        category = category_repository.create(name)
    except DuplicateRecordError as exc:
        logger.warning("Duplicate category on insert: %s", exc)
        raise already_exists("Category") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to create category %s", name)
        raise internal("Failed to create category") from exc

    logger.info("Created category %d (%s)", category.id, category.name)
    return to_category_response(category)


def update(category_id: int, request: UpdateCategoryRequest) -> dict:
    _check_id(category_id)

    try:
        request.validate()
    except ValidationError as exc:
        logger.warning("Category validation failed: %s", exc.details)
        raise

    name = request.name.strip()

    try:
        current = category_repository.get_by_id(category_id)
        existing = category_repository.get_by_name(name)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load category %d", category_id)
        raise internal("Failed to update category") from exc

    if current is None:
        raise not_found("Category")
    if existing is not None and existing.id != category_id:
        raise already_exists("Category with this name")

    is_active = current.is_active if request.is_active is None else request.is_active

    try:
        category = category_repository.update(category_id, name, is_active)
    except DuplicateRecordError as exc:
        raise already_exists("Category with this name") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to update category %d", category_id)
        raise internal("Failed to update category") from exc

    if category is None:
        raise not_found("Category")

    logger.info("Updated category %d (%s)", category.id, category.name)
    return to_category_response(category)


def delete(category_id: int) -> None:
    """
    Delete a category that no ticket uses.

    Raises:
        NotFoundError: If the category does not exist.
        ConflictError: If tickets still reference the category.
    """
    _check_id(category_id)

    try:
        if not category_repository.exists(category_id):
            raise not_found("Category")
        if category_repository.has_tickets(category_id):
            raise conflict("Category still has tickets")
        removed = category_repository.delete(category_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete category %d", category_id)
        raise internal("Failed to delete category") from exc

    if not removed:
        raise not_found("Category")

    logger.info("Deleted category %d", category_id)
