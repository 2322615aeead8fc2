"""
app/services/snapshot_service.py

Builds and stores period snapshots of the current streamer counters.

Each snapshot row carries ``host_usd`` and ``agency_usd`` computed at save
time, so later formula changes never rewrite history.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from db.models.snapshot import PeriodType, Snapshot
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.types import SnapshotInput
from kpi.agency import StreamerEarningsFormula
from kpi.dashboard import MONTH_NAMES, StreamerRecord

logger = logging.getLogger(__name__)


def default_period_label(period_type: str, today: date) -> str:
    """
    Suggested label for a new snapshot, e.g. ``"Semana 3 – Março 2025"``.

    Week numbers count 7-day blocks of the month (days 1-7 are week 1).
    """

    month = f"{MONTH_NAMES[today.month - 1]} {today.year}"
    if period_type == PeriodType.WEEKLY:
        return f"Semana {math.ceil(today.day / 7)} – {month}"
    if period_type == PeriodType.MONTHLY:
        return month
    return str(today.year)


class SnapshotService:
    """
    Computes snapshot payloads and persists them through the repository.
    """

    def __init__(self, formula: StreamerEarningsFormula | None = None) -> None:
        self._formula = formula or StreamerEarningsFormula()

    def build_snapshot(
        self,
        *,
        period_type: str,
        period_label: str,
        streamers: Sequence[StreamerRecord],
        snapshot_date: date | None = None,
    ) -> SnapshotInput:
        """
        Freeze *streamers* into a snapshot payload with period totals.
        """

        if period_type not in PeriodType.ALL:
            raise ValueError(
                f"Invalid period_type {period_type!r}. Must be one of: {sorted(PeriodType.ALL)}."
            )
        label = period_label.strip()
        if not label:
            raise ValueError("period_label must not be empty.")

        rows = [self._snapshot_row(streamer) for streamer in streamers]
        return SnapshotInput(
            period_type=period_type,
            period_label=label,
            snapshot_date=snapshot_date or datetime.now(tz=timezone.utc).date(),
            total_crystals=sum(row["host_crystals"] for row in rows),
            total_host_usd=sum(row["host_usd"] for row in rows),
            total_agency_usd=sum(row["agency_usd"] for row in rows),
            streamer_count=len(rows),
            data=rows,
        )

    def create_snapshot(
        self,
        *,
        period_type: str,
        period_label: str,
        streamers: Sequence[StreamerRecord],
        repository: SnapshotRepository,
        db: Session,
    ) -> Snapshot:
        """
        Build and commit a snapshot. Raises SnapshotExistsError when the
        same period type and label were already saved.
        """

        payload = self.build_snapshot(
            period_type=period_type,
            period_label=period_label,
            streamers=streamers,
        )
        try:
            snapshot = repository.create(payload)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Snapshot saved period_type=%s label=%r streamers=%d total_crystals=%d",
            payload.period_type,
            payload.period_label,
            payload.streamer_count,
            payload.total_crystals,
        )
        return snapshot

    def _snapshot_row(self, streamer: StreamerRecord) -> dict[str, Any]:
        earnings = self._formula.calculate({"host_crystals": streamer.host_crystals})
        return {
            "streamer_id": streamer.streamer_id,
            "name": streamer.name,
            "luck_gifts": streamer.luck_gifts,
            "exclusive_gifts": streamer.exclusive_gifts,
            "host_crystals": streamer.host_crystals,
            "host_usd": earnings["host_usd"],
            "agency_usd": earnings["agency_usd"],
            "minutes": streamer.minutes,
            "effective_days": streamer.effective_days,
        }


@lru_cache(maxsize=1)
def get_snapshot_service() -> SnapshotService:
    return SnapshotService()
