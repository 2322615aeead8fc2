"""
tests/conftest.py

In-memory stand-ins for the SQLAlchemy session and repositories.

They mirror the repository contracts (same method names, same exceptions)
so services and routers run without a database.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

import pytest

from batch_import.types import StreamerRef
from db.repositories.errors import (
    DuplicateStreamerError,
    SnapshotExistsError,
    SnapshotNotFoundError,
    StreamerNotFoundError,
)
from db.repositories.types import CounterUpdate, SnapshotInput, StreamerInput


@dataclass
class StreamerStub:
    streamer_id: str
    name: str
    luck_gifts: int = 0
    exclusive_gifts: int = 0
    host_crystals: int = 0
    minutes: int = 0
    effective_days: int = 0
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class SnapshotStub:
    period_type: str
    period_label: str
    snapshot_date: date
    data: list[dict[str, Any]] = field(default_factory=list)
    total_crystals: int = 0
    total_host_usd: float = 0.0
    total_agency_usd: float = 0.0
    streamer_count: int = 0
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime | None = None


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeStreamerRepository:
    """
    Dict-backed StreamerRepository. IDs listed in *failing_ids* raise on
    create/apply_counters to simulate store rejections.
    """

    def __init__(self, streamers: list[StreamerStub] | None = None, failing_ids: set[str] | None = None):
        self.streamers: list[StreamerStub] = list(streamers or [])
        self.failing_ids = set(failing_ids or ())

    def list_all(self, *, sort_field: str = "host_crystals", descending: bool = True, query: str | None = None):
        attribute = "host_crystals" if sort_field in {"host_usd", "agency_usd"} else sort_field
        if attribute not in {
            "name", "streamer_id", "luck_gifts", "exclusive_gifts",
            "host_crystals", "minutes", "effective_days",
        }:
            raise ValueError(f"Unsupported sort field {sort_field!r}.")
        rows = self.streamers
        if query:
            needle = query.lower()
            rows = [s for s in rows if needle in s.name.lower() or needle in s.streamer_id]
        return sorted(rows, key=lambda s: getattr(s, attribute), reverse=descending)

    def search(self, query: str):
        return self.list_all(query=query)

    def list_refs(self) -> list[StreamerRef]:
        return [StreamerRef(name=s.name, streamer_id=s.streamer_id) for s in self.streamers]

    def get(self, streamer_uuid: uuid.UUID) -> StreamerStub:
        for streamer in self.streamers:
            if streamer.id == streamer_uuid:
                return streamer
        raise StreamerNotFoundError(f"Streamer not found: {streamer_uuid}")

    def get_by_streamer_id(self, streamer_id: str) -> StreamerStub:
        for streamer in self.streamers:
            if streamer.streamer_id == streamer_id:
                return streamer
        raise StreamerNotFoundError(f"Streamer not found: {streamer_id}")

    def create(self, data: StreamerInput) -> StreamerStub:
        if data.streamer_id in self.failing_ids:
            raise DuplicateStreamerError(f"store rejected {data.streamer_id}")
        self._ensure_unique(data.streamer_id, data.name)
        streamer = StreamerStub(
            streamer_id=data.streamer_id,
            name=data.name,
            luck_gifts=data.luck_gifts,
            exclusive_gifts=data.exclusive_gifts,
            host_crystals=data.host_crystals,
            minutes=data.minutes,
            effective_days=data.effective_days,
        )
        self.streamers.append(streamer)
        return streamer

    def update(self, streamer_uuid: uuid.UUID, data: StreamerInput) -> StreamerStub:
        streamer = self.get(streamer_uuid)
        self._ensure_unique(data.streamer_id, data.name, exclude=streamer_uuid)
        for key, value in vars(data).items():
            setattr(streamer, key, value)
        return streamer

    def apply_counters(self, update: CounterUpdate) -> StreamerStub:
        if update.streamer_id in self.failing_ids:
            raise StreamerNotFoundError(f"Streamer not found: {update.streamer_id}")
        streamer = self.get_by_streamer_id(update.streamer_id)
        streamer.luck_gifts = update.luck_gifts
        streamer.exclusive_gifts = update.exclusive_gifts
        streamer.minutes = update.minutes
        if update.effective_days is not None:
            streamer.effective_days = update.effective_days
        return streamer

    def delete(self, streamer_uuid: uuid.UUID) -> None:
        self.streamers.remove(self.get(streamer_uuid))

    def _ensure_unique(self, streamer_id: str, name: str, exclude: uuid.UUID | None = None) -> None:
        for streamer in self.streamers:
            if streamer.id == exclude:
                continue
            if streamer.streamer_id == streamer_id or streamer.name == name:
                raise DuplicateStreamerError(
                    f"A streamer with ID {streamer_id!r} or name {name!r} already exists."
                )


class FakeSnapshotRepository:
    def __init__(self, snapshots: list[SnapshotStub] | None = None) -> None:
        self.snapshots: list[SnapshotStub] = list(snapshots or [])

    def list_all(self, *, period_type: str | None = None) -> list[SnapshotStub]:
        rows = [s for s in self.snapshots if period_type is None or s.period_type == period_type]
        return sorted(rows, key=lambda s: s.snapshot_date, reverse=True)

    def list_by_period(self, period_type: str) -> list[SnapshotStub]:
        return self.list_all(period_type=period_type)

    def get(self, snapshot_id: uuid.UUID) -> SnapshotStub:
        for snapshot in self.snapshots:
            if snapshot.id == snapshot_id:
                return snapshot
        raise SnapshotNotFoundError(f"Snapshot not found: {snapshot_id}")

    def exists(self, *, period_type: str, period_label: str) -> bool:
        return any(
            s.period_type == period_type and s.period_label == period_label for s in self.snapshots
        )

    def create(self, data: SnapshotInput) -> SnapshotStub:
        if self.exists(period_type=data.period_type, period_label=data.period_label):
            raise SnapshotExistsError(f"A snapshot for {data.period_label!r} already exists.")
        snapshot = SnapshotStub(
            period_type=data.period_type,
            period_label=data.period_label,
            snapshot_date=data.snapshot_date,
            data=list(data.data),
            total_crystals=data.total_crystals,
            total_host_usd=data.total_host_usd,
            total_agency_usd=data.total_agency_usd,
            streamer_count=data.streamer_count,
            created_at=datetime.now(tz=timezone.utc),
        )
        self.snapshots.append(snapshot)
        return snapshot

    def delete(self, snapshot_id: uuid.UUID) -> None:
        self.snapshots.remove(self.get(snapshot_id))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def streamer_repository() -> FakeStreamerRepository:
    return FakeStreamerRepository(
        [
            StreamerStub(streamer_id="10597690", name="Jub", host_crystals=15000, minutes=1500, effective_days=3),
            StreamerStub(streamer_id="10844565", name="Rô Ramos", host_crystals=50000, minutes=600),
        ]
    )


@pytest.fixture()
def snapshot_repository() -> FakeSnapshotRepository:
    return FakeSnapshotRepository()
