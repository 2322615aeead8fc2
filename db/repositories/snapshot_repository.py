"""
db/repositories/snapshot_repository.py

Persistence layer for period Snapshots.

The caller controls commit/rollback.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.snapshot import Snapshot
from db.repositories.errors import SnapshotExistsError, SnapshotNotFoundError
from db.repositories.types import SnapshotInput


class SnapshotRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self, *, period_type: str | None = None) -> list[Snapshot]:
        """Return snapshots newest first, optionally for one period type."""
        stmt = select(Snapshot).order_by(Snapshot.snapshot_date.desc(), Snapshot.created_at.desc())
        if period_type is not None:
            stmt = stmt.where(Snapshot.period_type == period_type)
        return list(self._session.scalars(stmt).all())

    def list_by_period(self, period_type: str) -> list[Snapshot]:
        return self.list_all(period_type=period_type)

    def get(self, snapshot_id: uuid.UUID) -> Snapshot:
        snapshot = self._session.get(Snapshot, snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(f"Snapshot not found: {snapshot_id}")
        return snapshot

    def exists(self, *, period_type: str, period_label: str) -> bool:
        stmt = (
            select(Snapshot.id)
            .where(Snapshot.period_type == period_type, Snapshot.period_label == period_label)
            .limit(1)
        )
        return self._session.scalars(stmt).first() is not None

    def create(self, data: SnapshotInput) -> Snapshot:
        if self.exists(period_type=data.period_type, period_label=data.period_label):
            raise SnapshotExistsError(f"A snapshot for {data.period_label!r} already exists.")
        snapshot = Snapshot(
            period_type=data.period_type,
            period_label=data.period_label,
            snapshot_date=data.snapshot_date,
            data=list(data.data),
            total_crystals=data.total_crystals,
            total_host_usd=data.total_host_usd,
            total_agency_usd=data.total_agency_usd,
            streamer_count=data.streamer_count,
        )
        self._session.add(snapshot)
        self._session.flush()
        return snapshot

    def delete(self, snapshot_id: uuid.UUID) -> None:
        self._session.delete(self.get(snapshot_id))
        self._session.flush()
