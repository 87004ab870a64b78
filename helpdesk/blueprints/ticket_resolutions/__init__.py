"""
Ticket resolutions blueprint.
"""

from flask import Blueprint

bp = Blueprint("ticket_resolutions", __name__)

from helpdesk.blueprints.ticket_resolutions import routes  # noqa: E402, F401
