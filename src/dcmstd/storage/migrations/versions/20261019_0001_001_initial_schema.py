"""Initial schema for the standard model tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# JSON documents, stored as JSONB on PostgreSQL
json_document = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema."""
    # Create ciods table
    op.create_table(
        "ciods",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("caption", sa.Text, nullable=False),
        sa.Column("parent_ids", json_document, nullable=True),
        sa.Column("items", json_document, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_ciods"),
    )

    # Create imds table (modules, macros and attribute tables)
    op.create_table(
        "imds",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("caption", sa.Text, nullable=False),
        sa.Column("parent_ids", json_document, nullable=True),
        sa.Column("items", json_document, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_imds"),
    )

    # Create data_elements table (part 06 registry)
    op.create_table(
        "data_elements",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("group_min", sa.Integer, nullable=False),
        sa.Column("group_max", sa.Integer, nullable=False),
        sa.Column("element_min", sa.Integer, nullable=False),
        sa.Column("element_max", sa.Integer, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("keyword", sa.String(255), nullable=False),
        sa.Column("vrs", json_document, nullable=True),
        sa.Column("vm", sa.String(32), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_data_elements"),
    )
    op.create_index("ix_data_elements_keyword", "data_elements", ["keyword"])
    op.create_index(
        "ix_data_elements_group_element", "data_elements", ["group_min", "element_min"]
    )


def downgrade() -> None:
    """Drop all tables."""
    # Drop tables in reverse order of creation
    op.drop_index("ix_data_elements_group_element", table_name="data_elements")
    op.drop_index("ix_data_elements_keyword", table_name="data_elements")
    op.drop_table("data_elements")
    op.drop_table("imds")
    op.drop_table("ciods")
