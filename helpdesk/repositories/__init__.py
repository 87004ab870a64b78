"""
Repository layer: the only code that issues SQL.

Repositories return models (or ``None`` when a row does not exist) and
let SQLAlchemy errors propagate; services translate them into
``AppError`` responses.  Every write commits its own transaction.
"""

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from helpdesk.extensions import db

# PostgreSQL SQLSTATE for unique_violation.
_PG_UNIQUE_VIOLATION = "23505"


class DuplicateRecordError(Exception):
    """A write hit a unique constraint."""


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when an IntegrityError comes from a unique constraint or index."""
    orig = exc.orig
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION:
        return True
    # SQLite reports uniqueness failures only through the message.
    return "UNIQUE constraint failed" in str(orig)


@contextmanager
def write_transaction(duplicate_message: str | None = None):
    """
    Commit the session on exit, rolling back on any database error.

    Args:
        duplicate_message: When given, unique violations are re-raised as
                           ``DuplicateRecordError`` with this message.
    """
    try:
        yield
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if duplicate_message and is_unique_violation(exc):
            raise DuplicateRecordError(duplicate_message) from exc
        raise
    except SQLAlchemyError:
        db.session.rollback()
        raise


def fetch_page(query, order_by, limit: int, offset: int) -> tuple[list, int]:
    """
    Count the filtered rows and load one ordered page of them.

    Returns:
        ``(items, total_items)``.
    """
    total_items = query.order_by(None).count()
    items = query.order_by(*order_by).limit(limit).offset(offset).all()
    return items, total_items


def row_exists(model, record_id: int) -> bool:
    return db.session.query(
        db.exists().where(model.id == record_id)
    ).scalar()
