"""
Tickets blueprint: ticket CRUD plus the per-ticket resolution and
attachment sub-resources.
"""

from flask import Blueprint

bp = Blueprint("tickets", __name__)

from helpdesk.blueprints.tickets import routes  # noqa: E402, F401
