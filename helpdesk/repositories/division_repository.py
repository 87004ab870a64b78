"""
Division repository: SQL access for the ``divisions`` table.
"""

from helpdesk.extensions import db
from helpdesk.models.organization import Division
from helpdesk.models.user import User
from helpdesk.repositories import fetch_page, row_exists, write_transaction
from helpdesk.schemas.division import DivisionListFilter


def get_all(list_filter: DivisionListFilter) -> tuple[list[Division], int]:
    """Return one page of divisions matching the filter plus the total count."""
    query = Division.query

    if list_filter.name:
        query = query.filter(Division.name.ilike(f"%{list_filter.name}%"))
    if list_filter.is_active is not None:
        query = query.filter(Division.is_active == list_filter.is_active)
    if list_filter.created_at is not None:
        query = query.filter(
            db.func.date(Division.created_at, type_=db.Date) == list_filter.created_at
        )

    return fetch_page(
        query,
        (Division.created_at.desc(), Division.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )


def get_by_id(division_id: int) -> Division | None:
    return db.session.get(Division, division_id)


def get_by_name(name: str) -> Division | None:
    """Case-insensitive lookup by name."""
    return Division.query.filter(
        db.func.lower(Division.name) == name.lower()
    ).first()


def exists(division_id: int) -> bool:
    return row_exists(Division, division_id)


def has_users(division_id: int) -> bool:
    return db.session.query(
        db.exists().where(User.division_id == division_id)
    ).scalar()


def create(name: str) -> Division:
    division = Division(name=name, is_active=True)
    with write_transaction(f"division with name '{name}' already exists"):
        db.session.add(division)
    return division


def update(division_id: int, name: str, is_active: bool) -> Division | None:
    division = get_by_id(division_id)
    if division is None:
        return None
    with write_transaction(f"division with name '{name}' already exists"):
        division.name = name
        division.is_active = is_active
    return division


def delete(division_id: int) -> bool:
    """Delete a division; returns False when no row was removed."""
    with write_transaction():
        removed = Division.query.filter(Division.id == division_id).delete(
            synchronize_session="fetch"
        )
    return removed > 0
