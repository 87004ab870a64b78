"""
Custom Flask CLI commands.

These commands are registered with the app via ``register_commands()``
in the application factory. Run them with ``flask <command_name>``.

Usage::

    flask db-check            # Verify database connectivity and tables
    flask ensure-upload-dirs  # Create the upload directory tree
    flask seed-dev-data       # Default division, category and admin user
"""

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from helpdesk import uploads
from helpdesk.extensions import db
from helpdesk.models.itsm import Category
from helpdesk.models.organization import Division
from helpdesk.models.user import ROLE_ADMIN, User
from helpdesk.services.user_service import hash_password

EXPECTED_TABLES = (
    "divisions",
    "categories",
    "users",
    "tickets",
    "ticket_resolutions",
    "ticket_attachments",
)

# -- Default values for the development seed -------------------------------
_DEFAULT_DIVISION = "IT Support"
_DEFAULT_CATEGORY = "General"
_DEFAULT_ADMIN_NAME = "Dev Admin"
_DEFAULT_ADMIN_EMAIL = "admin@helpdesk.local"
_DEFAULT_ADMIN_PASSWORD = "admin123"


def _masked_uri() -> str:
    """Return the configured database URL with the password hidden."""
    url = db.engine.url
    return url.render_as_string(hide_password=True)


@click.command("db-check")
@with_appcontext
def db_check_command():
    """
    Verify database connectivity and confirm the expected tables exist.

    Runs a trivial query against the configured database and lists
    which application tables are present.  Exits non-zero when the
    connection fails or tables are missing (run ``flask db upgrade``).
    """
    click.echo("=" * 60)
    click.echo(f"  {current_app.config['APP_NAME']} - Database Connectivity Check")
    click.echo("=" * 60)
    click.echo(f"\n  Connection string: {_masked_uri()}\n")

    # -- Step 1: Basic connectivity ----------------------------------------
    click.echo("[1/2] Testing connection...")
    try:
        db.session.execute(db.text("SELECT 1"))
    except SQLAlchemyError as exc:
        click.secho(f"      ✗ Connection failed: {exc}", fg="red")
        click.echo("\n  Troubleshooting tips:")
        click.echo("    - Is PostgreSQL running and reachable on DB_HOST:DB_PORT?")
        click.echo("    - Do DB_USER / DB_PASSWORD match the server?")
        click.echo("    - Does DB_SSLMODE match the server's SSL settings?")
        raise SystemExit(1) from exc
    click.secho("      ✓ Connected successfully.", fg="green")

    # -- Step 2: Tables ----------------------------------------------------
    click.echo("[2/2] Checking tables...\n")
    existing = set(inspect(db.engine).get_table_names())
    missing = [name for name in EXPECTED_TABLES if name not in existing]

    for name in EXPECTED_TABLES:
        marker = "✓" if name in existing else "✗"
        click.echo(f"      {marker} {name}")

    if missing:
        click.secho(
            f"\n      {len(missing)} table(s) missing. Run 'flask db upgrade'.",
            fg="red",
        )
        raise SystemExit(1)

    click.echo("\n" + "=" * 60)
    click.secho("  All checks passed. Database is ready.", fg="green", bold=True)
    click.echo("=" * 60)


@click.command("ensure-upload-dirs")
@with_appcontext
def ensure_upload_dirs_command():
    """Create the avatar, ticket image and document upload directories."""
    for path in uploads.ensure_upload_dirs():
        click.echo(f"  ✓ {path}")


@click.command("seed-dev-data")
@click.option(
    "--email",
    default=_DEFAULT_ADMIN_EMAIL,
    show_default=True,
    help="Email address for the dev admin user.",
)
@click.option(
    "--password",
    default=_DEFAULT_ADMIN_PASSWORD,
    show_default=True,
    help="Password for the dev admin user.",
)
@with_appcontext
def seed_dev_data_command(email: str, password: str):
    """
    Create a default division, category and admin user for local work.

    Existing rows are reused, so the command is safe to run repeatedly.
    """
    division = Division.query.filter(
        db.func.lower(Division.name) == _DEFAULT_DIVISION.lower()
    ).first()
    if division is None:
        division = Division(name=_DEFAULT_DIVISION, is_active=True)
        db.session.add(division)
        db.session.flush()
        click.echo(f"  Created division '{division.name}'.")

    category = Category.query.filter(
        db.func.lower(Category.name) == _DEFAULT_CATEGORY.lower()
    ).first()
    if category is None:
        db.session.add(Category(name=_DEFAULT_CATEGORY, is_active=True))
        click.echo(f"  Created category '{_DEFAULT_CATEGORY}'.")

    email = email.strip().lower()
    user = User.query.filter(db.func.lower(User.email) == email).first()
    if user is None:
        user = User(
            name=_DEFAULT_ADMIN_NAME,
            email=email,
            password=hash_password(password),
            role=ROLE_ADMIN,
            division_id=division.id,
            is_active=True,
        )
        db.session.add(user)
        click.echo(f"  Created admin user '{email}'.")
    elif not user.is_active:
        user.is_active = True
        click.echo(f"  Reactivated admin user '{email}'.")
    else:
        click.echo(f"  Admin user '{email}' already exists.")

    db.session.commit()
    click.secho("Development data is ready.", fg="green")


def register_commands(app):
    """Register all custom CLI commands with the Flask application."""
    app.cli.add_command(db_check_command)
    app.cli.add_command(ensure_upload_dirs_command)
    app.cli.add_command(seed_dev_data_command)
