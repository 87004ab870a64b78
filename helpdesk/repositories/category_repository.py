"""
Category repository: SQL access for the ``categories`` table.
"""

from helpdesk.extensions import db
from helpdesk.models.itsm import Category, Ticket
from helpdesk.repositories import fetch_page, row_exists, write_transaction
from helpdesk.schemas.category import CategoryListFilter


def get_all(list_filter: CategoryListFilter) -> tuple[list[Category], int]:
    """Return one page of categories matching the filter plus the total count."""
    query = Category.query

    if list_filter.name:
        query = query.filter(Category.name.ilike(f"%{list_filter.name}%"))
    if list_filter.is_active is not None:
        query = query.filter(Category.is_active == list_filter.is_active)
    if list_filter.created_at is not None:
        query = query.filter(
            db.func.date(Category.created_at, type_=db.Date) == list_filter.created_at
        )

    return fetch_page(
        query,
        (Category.created_at.desc(), Category.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )


def get_by_id(category_id: int) -> Category | None:
    return db.session.get(Category, category_id)


def get_by_name(name: str) -> Category | None:
    """Case-insensitive lookup by name."""
    return Category.query.filter(
        db.func.lower(Category.name) == name.lower()
    ).first()


def exists(category_id: int) -> bool:
    return row_exists(Category, category_id)


def has_tickets(category_id: int) -> bool:
    return db.session.query(
        db.exists().where(Ticket.category_id == category_id)
    ).scalar()


def create(name: str) -> Category:
    category = Category(name=name, is_active=True)
    with write_transaction(f"category with name '{name}' already exists"):
        db.session.add(category)
    return category


def update(category_id: int, name: str, is_active: bool) -> Category | None:
    category = get_by_id(category_id)
    if category is None:
        return None
    with write_transaction(f"category with name '{name}' already exists"):
        category.name = name
        category.is_active = is_active
    return category


def delete(category_id: int) -> bool:
    """Delete a category; returns False when no row was removed."""
    with write_transaction():
        removed = Category.query.filter(Category.id == category_id).delete(
            synchronize_session="fetch"
        )
    return removed > 0
