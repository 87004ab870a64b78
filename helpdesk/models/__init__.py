"""
Model package: imports all models so Alembic and SQLAlchemy can
discover them automatically when ``flask db`` commands are run.

  - organization.py -> divisions
  - user.py         -> users
  - itsm.py         -> categories, tickets, ticket_resolutions,
                       ticket_attachments
"""

from helpdesk.models.organization import Division  # noqa: F401
from helpdesk.models.user import User  # noqa: F401
from helpdesk.models.itsm import (  # noqa: F401
    Category,
    Ticket,
    TicketAttachment,
    TicketResolution,
)
