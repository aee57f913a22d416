"""initial schema: identities, catalog entries, notices, bookmarks

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "identities",
        sa.Column("key", sa.String(320), primary_key=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("display_name", sa.String(256), nullable=True),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("groups", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "catalog_entries",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("redirect_url", sa.Text(), nullable=False),
        sa.Column("allowed_groups", sa.JSON(), nullable=False),
        sa.Column("image_ref", sa.String(512), nullable=True),
        sa.Column("original_width", sa.Integer(), nullable=True),
        sa.Column("original_height", sa.Integer(), nullable=True),
        sa.Column("display_height", sa.Integer(), nullable=True),
        sa.Column("display_width", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "notices",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("recipient_key", sa.String(320), nullable=False),
        sa.Column(
            "severity",
            sa.Enum("information", "warning", "error", name="noticeseverity"),
            nullable=False,
        ),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("dismissed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notices_recipient_key", "notices", ["recipient_key"])
    op.create_index("ix_notices_recipient_dismissed", "notices", ["recipient_key", "dismissed"])
    op.create_table(
        "bookmarks",
        sa.Column("owner_key", sa.String(320), primary_key=True),
        sa.Column("url", sa.String(2048), primary_key=True),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("bookmarks")
    op.drop_index("ix_notices_recipient_dismissed", table_name="notices")
    op.drop_index("ix_notices_recipient_key", table_name="notices")
    op.drop_table("notices")
    op.drop_table("catalog_entries")
    op.drop_table("identities")
