"""
Organization structure models.

Divisions group users.  A division can be deactivated instead of
deleted while users still belong to it.
"""

from helpdesk.extensions import db


class Division(db.Model):
    """Organizational unit that every user belongs to."""

    __tablename__ = "divisions"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    __table_args__ = (
        db.Index(
            "idx_divisions_name_lower_unique", db.func.lower(name), unique=True
        ),
    )

    # -- Relationships -----------------------------------------------------
    users = db.relationship("User", back_populates="division", lazy="dynamic")

    def __repr__(self) -> str:
        return f"<Division {self.id}: {self.name}>"
