"""
Main blueprint: health check and uploaded file serving.
"""

from flask import Blueprint

bp = Blueprint("main", __name__)

# Import routes after blueprint creation to avoid circular imports.
from helpdesk.blueprints.main import routes  # noqa: E402, F401
