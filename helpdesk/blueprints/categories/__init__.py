"""
Categories blueprint: CRUD for the ticket categories.
"""

from flask import Blueprint

bp = Blueprint("categories", __name__)

from helpdesk.blueprints.categories import routes  # noqa: E402, F401
