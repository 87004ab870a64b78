"""
Ticket attachments blueprint: images and documents attached to tickets.
"""

from flask import Blueprint

bp = Blueprint("ticket_attachments", __name__)

from helpdesk.blueprints.ticket_attachments import routes  # noqa: E402, F401
