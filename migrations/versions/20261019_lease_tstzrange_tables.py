"""Lease and maintenance window tables with tstzrange periods

Revision ID: 20261019_lease_tstzrange_tables
Revises: 
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20261019_lease_tstzrange_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "active_during",
            postgresql.TSTZRANGE(),
            nullable=True,
            server_default=sa.text("'empty'::tstzrange"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("TIMEZONE('utc', now())"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("TIMEZONE('utc', now())"),
        ),
    )
    op.create_index("ix_leases_id", "leases", ["id"])

    op.create_table(
        "maintenance_windows",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("period", postgresql.TSTZRANGE(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("TIMEZONE('utc', now())"),
        ),
    )
    op.create_index("ix_maintenance_windows_id", "maintenance_windows", ["id"])


def downgrade() -> None:
    op.drop_index("ix_maintenance_windows_id", table_name="maintenance_windows")
    op.drop_table("maintenance_windows")
    op.drop_index("ix_leases_id", table_name="leases")
    op.drop_table("leases")
