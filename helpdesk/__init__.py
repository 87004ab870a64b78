"""
Application factory for the Helpdesk ticketing API.

Usage::

    from helpdesk import create_app
    app = create_app()           # Uses FLASK_ENV to pick config.
    app = create_app("testing")  # Explicit config for tests.
"""

import logging
import os

from flask import Flask
from werkzeug.exceptions import HTTPException

from .config import config_by_name
from .errors import (
    CODE_BAD_REQUEST,
    CODE_INTERNAL_ERROR,
    CODE_NOT_FOUND,
    AppError,
    internal,
)
from .extensions import db, migrate
from .middleware import register_request_hooks
from .responses import error

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Messages for framework-level HTTP errors rendered as JSON.
_HTTP_MESSAGES = {
    404: "Route not found",
    405: "Method not allowed",
    413: "Request body too large",
}


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: One of 'development', 'testing', or 'production'.
                     Defaults to the FLASK_ENV environment variable,
                     falling back to 'development'.

    Returns:
        A fully configured Flask application instance.
    """
    # Resolve the configuration class.
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")
    config_class = config_by_name.get(config_name)
    if config_class is None:
        raise ValueError(
            f"Unknown config '{config_name}'. "
            f"Valid options: {list(config_by_name.keys())}"
        )

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False

    # -- Configure logging -------------------------------------------------
    _configure_logging(app)

    if config_name == "production":
        config_class.validate_production_settings(app.config)

    # -- Initialize extensions ---------------------------------------------
    _register_extensions(app)

    # -- Register blueprints -----------------------------------------------
    _register_blueprints(app)

    # -- Register error handlers -------------------------------------------
    _register_error_handlers(app)

    # -- Request id / access log -------------------------------------------
    register_request_hooks(app)

    # -- Register custom CLI commands --------------------------------------
    _register_cli_commands(app)

    logger.info("%s initialised (%s)", app.config["APP_NAME"], config_name)
    return app


def _register_extensions(app: Flask) -> None:
    """Bind all Flask extensions to the application instance."""
    db.init_app(app)
    migrate.init_app(app, db)

    # Imported so every model is registered on the metadata.
    from . import models  # noqa: F401  pylint: disable=import-outside-toplevel


def _register_blueprints(app: Flask) -> None:
    """
    Import and register each blueprint.

    Blueprints are imported inside this function to avoid circular
    imports: models and services can safely import ``db`` from
    extensions at module level.
    """
    # pylint: disable=import-outside-toplevel

    # Main: health check and uploaded files, served from the root.
    from .blueprints.main import bp as main_bp

    app.register_blueprint(main_bp)

    from .blueprints.divisions import bp as divisions_bp
    from .blueprints.categories import bp as categories_bp
    from .blueprints.users import bp as users_bp
    from .blueprints.tickets import bp as tickets_bp
    from .blueprints.ticket_resolutions import bp as ticket_resolutions_bp
    from .blueprints.ticket_attachments import bp as ticket_attachments_bp

    for blueprint in (
        divisions_bp,
        categories_bp,
        users_bp,
        tickets_bp,
        ticket_resolutions_bp,
        ticket_attachments_bp,
    ):
        app.register_blueprint(blueprint, url_prefix=API_PREFIX)


def _register_error_handlers(app: Flask) -> None:
    """Render every error as the JSON error envelope."""

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        """Handle errors raised deliberately by services and binding."""
        if err.status_code >= 500:
            db.session.rollback()
            logger.error("%s: %s", err.code, err.message)
        else:
            logger.debug("%s: %s", err.code, err.message)
        return error(err)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        """Handle routing and protocol errors raised by Werkzeug."""
        status = exc.code or 500
        err = AppError(_HTTP_MESSAGES.get(status, exc.name))
        if status == 404:
            err.code = CODE_NOT_FOUND
        elif status >= 500:
            err.code = CODE_INTERNAL_ERROR
        else:
            err.code = CODE_BAD_REQUEST
        err.status_code = status
        return error(err)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        """Handle anything else as a 500 Internal Server Error."""
        db.session.rollback()
        logger.exception("Unhandled exception: %s", exc)
        return error(internal("Internal server error"))


def _register_cli_commands(app: Flask) -> None:
    """Register custom Flask CLI commands (e.g., flask db-check)."""
    from .cli import register_commands  # pylint: disable=import-outside-toplevel

    register_commands(app)


def _configure_logging(app: Flask) -> None:
    """
    Set the root log level from ``LOG_LEVEL``.

    SQL echo is left to ``SQLALCHEMY_ECHO``; the engine logger is kept
    at WARNING otherwise so debug logs stay readable.
    """
    log_level = app.config.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, log_level, logging.INFO))

    if not app.config.get("SQLALCHEMY_ECHO"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
