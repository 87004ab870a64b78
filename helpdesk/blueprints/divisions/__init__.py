"""
Divisions blueprint: CRUD for the organisational units users belong to.
"""

from flask import Blueprint

bp = Blueprint("divisions", __name__)

from helpdesk.blueprints.divisions import routes  # noqa: E402, F401
