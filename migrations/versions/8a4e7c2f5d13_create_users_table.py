"""Create users table

Revision ID: 8a4e7c2f5d13
Revises: 3c1f0a9d2b61
Create Date: 2026-02-26 08:47:45.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "8a4e7c2f5d13"
down_revision = "3c1f0a9d2b61"
branch_labels = None
depends_on = None


def upgrade():
    """Users belong to a division; email is unique ignoring case."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=15), nullable=True),
        sa.Column("role", sa.String(length=10), nullable=False),
        sa.Column("division_id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["division_id"], ["divisions.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_name", "users", ["name"])
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_division_id", "users", ["division_id"])
    op.create_index(
        "idx_users_email_lower_unique",
        "users",
        [sa.text("lower(email)")],
        unique=True,
    )


def downgrade():
    op.drop_index("idx_users_email_lower_unique", table_name="users")
    op.drop_index("ix_users_division_id", table_name="users")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_name", table_name="users")
    op.drop_table("users")
