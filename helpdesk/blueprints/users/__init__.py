"""
Users blueprint: user accounts and avatars.
"""

from flask import Blueprint

bp = Blueprint("users", __name__)

from helpdesk.blueprints.users import routes  # noqa: E402, F401
