"""create scraped_items table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "scraped_items",
        sa.Column("id", sa.String(length=2048), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("price", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=255), nullable=False),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("first_seen_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scraped_items_scraped_at", "scraped_items", ["scraped_at"], unique=False)
    op.create_index("ix_scraped_items_source", "scraped_items", ["source"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_scraped_items_source", table_name="scraped_items")
    op.drop_index("ix_scraped_items_scraped_at", table_name="scraped_items")
    op.drop_table("scraped_items")
