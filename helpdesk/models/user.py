"""
User model.

Passwords are stored as bcrypt hashes and never leave the service
layer.  ``role`` is a plain string constrained to ``VALID_ROLES`` by
the request schemas.
"""

from helpdesk.extensions import db

ROLE_ADMIN = "ADMIN"
ROLE_IT = "IT"
ROLE_STAFF = "STAFF"

VALID_ROLES: tuple[str, ...] = (ROLE_ADMIN, ROLE_IT, ROLE_STAFF)


class User(db.Model):
    """Helpdesk user: ticket reporter, assignee or administrator."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(50), nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    avatar_url = db.Column(db.Text, nullable=True)
    phone = db.Column(db.String(15), nullable=True)
    role = db.Column(db.String(10), nullable=False, index=True)
    division_id = db.Column(
        db.Integer, db.ForeignKey("divisions.id"), nullable=False, index=True
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    __table_args__ = (
        db.Index("idx_users_email_lower_unique", db.func.lower(email), unique=True),
    )

    # -- Relationships -----------------------------------------------------
    # Joined so list responses can include the division name without
    # an extra query per row.
    division = db.relationship("Division", back_populates="users", lazy="joined")

    @property
    def division_name(self) -> str | None:
        return self.division.name if self.division else None

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
