"""
Routes for the main blueprint: health check and ``/uploads`` files.
"""

import logging

from flask import current_app, send_from_directory
from sqlalchemy.exc import SQLAlchemyError

from helpdesk.blueprints.main import bp
from helpdesk.extensions import db

logger = logging.getLogger(__name__)


@bp.route("/health")
def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns 200 if the app is running and can reach the database.
    """
    try:
        db.session.execute(db.text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}, 200
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        db.session.rollback()
        return {"status": "unhealthy", "database": "unreachable"}, 503


@bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    """Serve a stored avatar or attachment; unknown paths are 404."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
