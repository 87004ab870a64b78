"""
User repository: SQL access for the ``users`` table.

Users are always loaded with their division so responses can carry
``divisionName``.
"""

from helpdesk.extensions import db
from helpdesk.models.itsm import Ticket, TicketAttachment, TicketResolution
from helpdesk.models.user import User
from helpdesk.repositories import fetch_page, write_transaction
from helpdesk.schemas.user import UserListFilter

def get_all(list_filter: UserListFilter) -> tuple[list[User], int]:
    """Return one page of users matching the filter plus the total count."""
    query = User.query

    if list_filter.name:
        query = query.filter(User.name.ilike(f"%{list_filter.name}%"))
    if list_filter.role:
        query = query.filter(User.role == list_filter.role)
    if list_filter.division_id > 0:
        query = query.filter(User.division_id == list_filter.division_id)
    if list_filter.is_active is not None:
        query = query.filter(User.is_active == list_filter.is_active)

    return fetch_page(
        query,
        (User.created_at.desc(), User.id.desc()),
        list_filter.limit,
        list_filter.offset,
    )

def get_by_id(user_id: int) -> User | None:
    return db.session.get(User, user_id)

def get_by_email(email: str) -> User | None:
    """Case-insensitive lookup by email address."""
    return User.query.filter(db.func.lower(User.email) == email.lower()).first()

def is_referenced(user_id: int) -> bool:
    """True while tickets, resolutions or attachments point at the user."""
    checks = (
        db.exists().where(
            db.or_(Ticket.created_by == user_id, Ticket.assigned_to == user_id)
        ),
        db.exists().where(TicketResolution.resolved_by == user_id),
        db.exists().where(TicketAttachment.uploaded_by == user_id),
    )
    return any(db.session.query(check).scalar() for check in checks)

def create(
    name: str,
    email: str,
    password_hash: str,
    phone: str | None,
    role: str,
    division_id: int,
) -> User:
    user = User(
        name=name,
        email=email,
        password=password_hash,
        phone=phone,
        role=role,
        division_id=division_id,
        is_active=True,
    )
    with write_transaction(f"user with email '{email}' already exists"):
        db.session.add(user)
    return user

def update(
    user_id: int,
    name: str,
    phone: str | None,
    role: str,
    division_id: int,
    is_active: bool,
) -> User | None:
    user = get_by_id(user_id)
    if user is None:
        return None
    with write_transaction():
        user.name = name
        user.phone = phone
        user.role = role
        user.division_id = division_id
        user.is_active = is_active
    return user

def update_avatar(user_id: int, avatar_url: str) -> User | None:
    user = get_by_id(user_id)
    if user is None:
        return None
    with write_transaction():
        user.avatar_url = avatar_url
    return user

def delete(user_id: int) -> bool:
    """Delete a user; returns False when no row was removed."""
    with write_transaction():
        removed = User.query.filter(User.id == user_id).delete(
            synchronize_session="fetch"
        )
    return removed > 0
