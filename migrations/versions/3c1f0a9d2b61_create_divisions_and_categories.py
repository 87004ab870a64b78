"""Create divisions and categories tables

Revision ID: 3c1f0a9d2b61
Revises:
Create Date: 2026-02-25 15:07:08.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3c1f0a9d2b61"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create the two lookup tables with case-insensitive unique names."""
    op.create_table(
        "divisions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        "idx_divisions_name_lower_unique",
        "divisions",
        [sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        "idx_categories_name_lower_unique",
        "categories",
        [sa.text("lower(name)")],
        unique=True,
    )


def downgrade():
    op.drop_index("idx_categories_name_lower_unique", table_name="categories")
    op.drop_table("categories")
    op.drop_index("idx_divisions_name_lower_unique", table_name="divisions")
    op.drop_table("divisions")
