"""create streamers and snapshots tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

_COUNTER_COLUMNS = ("luck_gifts", "exclusive_gifts", "host_crystals", "minutes", "effective_days")


def upgrade() -> None:
    op.create_table(
        "streamers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "streamer_id",
            sa.String(length=32),
            nullable=False,
            comment="Platform identifier, at least five digits",
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("luck_gifts", sa.Integer(), nullable=False),
        sa.Column("exclusive_gifts", sa.Integer(), nullable=False),
        sa.Column("host_crystals", sa.Integer(), nullable=False),
        sa.Column("minutes", sa.Integer(), nullable=False),
        sa.Column(
            "effective_days",
            sa.Integer(),
            nullable=False,
            comment="Days with at least the minimum airtime",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("streamer_id"),
        sa.UniqueConstraint("name"),
        *(
            sa.CheckConstraint(f"{column} >= 0", name=f"ck_streamers_{column}_non_negative")
            for column in _COUNTER_COLUMNS
        ),
    )

    op.create_table(
        "snapshots",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("period_type", sa.String(length=16), nullable=False, comment="weekly | monthly | yearly"),
        sa.Column("period_label", sa.String(length=120), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("total_crystals", sa.Integer(), nullable=False),
        sa.Column("total_host_usd", sa.Float(), nullable=False),
        sa.Column("total_agency_usd", sa.Float(), nullable=False),
        sa.Column("streamer_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("period_type", "period_label", name="uq_snapshots_period_type_label"),
    )
    op.create_index("ix_snapshots_snapshot_date", "snapshots", ["snapshot_date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_snapshots_snapshot_date", table_name="snapshots")
    op.drop_table("snapshots")
    op.drop_table("streamers")
