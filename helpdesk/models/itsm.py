"""
IT service management models: categories, tickets, resolutions and
attachments.

Ticket ``priority`` and ``status`` are plain strings checked against
the tuples below.  There is no enforced status workflow; the service
only stamps ``resolved_at`` / ``closed_at`` the first time a ticket
reaches those statuses.
"""

from helpdesk.extensions import db

PRIORITY_LOW = "LOW"
PRIORITY_MEDIUM = "MEDIUM"
PRIORITY_URGENT = "URGENT"

VALID_PRIORITIES: tuple[str, ...] = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_URGENT)

STATUS_OPEN = "OPEN"
STATUS_IN_PROGRESS = "INPROGRESS"
STATUS_RESOLVED = "RESOLVED"
STATUS_CLOSED = "CLOSED"

VALID_STATUSES: tuple[str, ...] = (
    STATUS_OPEN,
    STATUS_IN_PROGRESS,
    STATUS_RESOLVED,
    STATUS_CLOSED,
)

ATTACHMENT_IMAGE = "IMAGE"
ATTACHMENT_FILE = "FILE"

VALID_ATTACHMENT_TYPES: tuple[str, ...] = (ATTACHMENT_IMAGE, ATTACHMENT_FILE)


class Category(db.Model):
    """Ticket category (e.g. Hardware, Network)."""

    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(20), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    __table_args__ = (
        db.Index(
            "idx_categories_name_lower_unique", db.func.lower(name), unique=True
        ),
    )

    def __repr__(self) -> str:
        return f"<Category {self.id}: {self.name}>"


class Ticket(db.Model):
    """Helpdesk ticket raised by a user."""

    __tablename__ = "tickets"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id"), nullable=False, index=True
    )
    priority = db.Column(db.String(50), nullable=False, index=True)
    status = db.Column(
        db.String(20), nullable=False, default=STATUS_OPEN, index=True
    )
    created_by = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    assigned_to = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=True, index=True
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    assigned_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    resolved_at = db.Column(db.DateTime, nullable=True)
    closed_at = db.Column(db.DateTime, nullable=True)

    # -- Relationships -----------------------------------------------------
    category = db.relationship("Category", lazy="joined")
    resolution = db.relationship(
        "TicketResolution",
        back_populates="ticket",
        uselist=False,
        cascade="all, delete-orphan",
    )
    attachments = db.relationship(
        "TicketAttachment",
        back_populates="ticket",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Ticket {self.id}: {self.title}>"


class TicketResolution(db.Model):
    """The single resolution note recorded for a ticket."""

    __tablename__ = "ticket_resolutions"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    ticket_id = db.Column(
        db.Integer,
        db.ForeignKey("tickets.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    resolved_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    resolution_note = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    ticket = db.relationship("Ticket", back_populates="resolution")

    def __repr__(self) -> str:
        return f"<TicketResolution {self.id}: ticket {self.ticket_id}>"


class TicketAttachment(db.Model):
    """Image or document uploaded against a ticket."""

    __tablename__ = "ticket_attachments"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    ticket_id = db.Column(
        db.Integer,
        db.ForeignKey("tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    uploaded_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    file_url = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(50), nullable=False, index=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    ticket = db.relationship("Ticket", back_populates="attachments")

    def __repr__(self) -> str:
        return f"<TicketAttachment {self.id}: {self.file_url}>"
