"""
db/models/streamer.py

Streamer profile: one row per streamer managed by the agency, holding the
counters of the current (not yet snapshotted) period.
"""

import uuid

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

STREAMER_COUNTER_FIELDS: tuple[str, ...] = (
    "luck_gifts",
    "exclusive_gifts",
    "host_crystals",
    "minutes",
    "effective_days",
)


class Streamer(Base, TimestampMixin):
    """
    A streamer identified by the platform's numeric ID.

    Both ``streamer_id`` and ``name`` are unique: batch imports and the
    manual form reject a profile sharing either with another streamer.
    """

    __tablename__ = "streamers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    streamer_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        comment="Platform identifier, at least five digits",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    luck_gifts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exclusive_gifts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    host_crystals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    effective_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Days with at least the minimum airtime",
    )

    __table_args__ = tuple(
        CheckConstraint(f"{column} >= 0", name=f"ck_streamers_{column}_non_negative")
        for column in STREAMER_COUNTER_FIELDS
    )

    def __repr__(self) -> str:
        return f"<Streamer id={self.id} streamer_id={self.streamer_id!r} name={self.name!r}>"
