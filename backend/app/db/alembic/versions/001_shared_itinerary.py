"""Shared itinerary table

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates shared_itinerary: public snapshots with expiry, soft delete and a
per-share delete token.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create shared_itinerary."""
    op.create_table(
        "shared_itinerary",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("markdown", sa.Text(), nullable=False),
        sa.Column("payload", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delete_token", sa.String(64), nullable=False),
    )
    op.create_index("idx_shared_itinerary_expires", "shared_itinerary", ["expires_at"])


def downgrade() -> None:
    """Drop shared_itinerary."""
    op.drop_index("idx_shared_itinerary_expires", table_name="shared_itinerary")
    op.drop_table("shared_itinerary")
