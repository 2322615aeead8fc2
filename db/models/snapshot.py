"""
db/models/snapshot.py

Snapshot: a frozen copy of every streamer's counters for one period
(week, month or year), with the totals the dashboard charts read.
"""

import uuid
from datetime import date

from sqlalchemy import Date, Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin


class PeriodType:
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    ALL = frozenset({WEEKLY, MONTHLY, YEARLY})


class Snapshot(Base, CreatedAtMixin):
    """
    One period snapshot. ``data`` holds one JSON object per streamer with
    the counters plus ``host_usd`` and ``agency_usd`` computed at save time.
    """

    __tablename__ = "snapshots"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    period_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="weekly | monthly | yearly",
    )

    period_label: Mapped[str] = mapped_column(String(120), nullable=False)

    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False)

    data: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    total_crystals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_host_usd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_agency_usd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    streamer_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("period_type", "period_label", name="uq_snapshots_period_type_label"),
        Index("ix_snapshots_snapshot_date", "snapshot_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Snapshot id={self.id} period_type={self.period_type!r} "
            f"period_label={self.period_label!r}>"
        )
