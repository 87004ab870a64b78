"""
Pytest configuration and shared fixtures.

Every test gets its own application built with the ``testing`` config
(SQLite in memory), a freshly created schema, and an upload folder
under ``tmp_path``.  Factory fixtures insert rows directly through the
models so tests can set up exactly the state they need.
"""

import pytest

from helpdesk import create_app
from helpdesk.extensions import db as _db
from helpdesk.models.itsm import STATUS_OPEN, Category, Ticket
from helpdesk.models.organization import Division
from helpdesk.models.user import ROLE_STAFF, User
from helpdesk.services.user_service import hash_password

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def app(tmp_path):
    """
    Create a Flask application configured for testing.

    The schema is created from the models before the test and dropped
    afterwards, so tests never share rows.
    """
    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):  # pylint: disable=redefined-outer-name
    """Provide the SQLAlchemy database instance."""
    return _db


@pytest.fixture()
def client(app):  # pylint: disable=redefined-outer-name
    """
    Provide a Flask test client for making HTTP requests.

    Usage in tests::

        def test_health(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def upload_root(app):  # pylint: disable=redefined-outer-name
    """Absolute path of the per-test upload folder."""
    return app.config["UPLOAD_FOLDER"]


# -- Factories -------------------------------------------------------------


@pytest.fixture()
def make_division(app):  # pylint: disable=redefined-outer-name
    def _make(name="IT Support", is_active=True):
        division = Division(name=name, is_active=is_active)
        _db.session.add(division)
        _db.session.commit()
        return division

    return _make


@pytest.fixture()
def make_category(app):  # pylint: disable=redefined-outer-name
    def _make(name="Hardware", is_active=True):
        category = Category(name=name, is_active=is_active)
        _db.session.add(category)
        _db.session.commit()
        return category

    return _make


@pytest.fixture()
def make_user(app, make_division):  # pylint: disable=redefined-outer-name
    def _make(
        name="Jane Staff",
        email="jane@example.com",
        role=ROLE_STAFF,
        division=None,
        is_active=True,
        avatar_url=None,
    ):
        if division is None:
            division = Division.query.first() or make_division()
        user = User(
            name=name,
            email=email,
            password=hash_password(DEFAULT_PASSWORD),
            role=role,
            division_id=division.id,
            is_active=is_active,
            avatar_url=avatar_url,
        )
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make


@pytest.fixture()
def make_ticket(app, make_category, make_user):  # pylint: disable=redefined-outer-name
    def _make(
        title="Printer jammed",
        description="The second floor printer jams on every job.",
        category=None,
        priority="MEDIUM",
        status=STATUS_OPEN,
        created_by=None,
        assigned_to=None,
    ):
        if category is None:
            category = Category.query.first() or make_category()
        if created_by is None:
            created_by = User.query.first() or make_user()
        ticket = Ticket(
            title=title,
            description=description,
            category_id=category.id,
            priority=priority,
            status=status,
            created_by=created_by.id,
            assigned_to=assigned_to.id if assigned_to is not None else None,
        )
        _db.session.add(ticket)
        _db.session.commit()
        return ticket

    return _make
