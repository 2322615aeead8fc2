"""
db/repositories/streamer_repository.py

Persistence layer for Streamer profiles.

The caller controls commit/rollback; this repository only adds, flushes and
deletes within the caller's session.
"""

from __future__ import annotations

import uuid

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from batch_import.types import StreamerRef
from db.models.streamer import Streamer
from db.repositories.errors import DuplicateStreamerError, StreamerNotFoundError
from db.repositories.types import CounterUpdate, StreamerInput

# USD columns are derived from host_crystals, so they sort by it.
SORT_COLUMNS = {
    "name": Streamer.name,
    "streamer_id": Streamer.streamer_id,
    "luck_gifts": Streamer.luck_gifts,
    "exclusive_gifts": Streamer.exclusive_gifts,
    "host_crystals": Streamer.host_crystals,
    "host_usd": Streamer.host_crystals,
    "agency_usd": Streamer.host_crystals,
    "minutes": Streamer.minutes,
    "effective_days": Streamer.effective_days,
}
DEFAULT_SORT_FIELD = "host_crystals"


class StreamerRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_all(
        self,
        *,
        sort_field: str = DEFAULT_SORT_FIELD,
        descending: bool = True,
        query: str | None = None,
    ) -> list[Streamer]:
        """
        Return streamers ordered by *sort_field*, optionally filtered by a
        case-insensitive substring of name or streamer ID.
        """

        column = SORT_COLUMNS.get(sort_field)
        if column is None:
            raise ValueError(f"Unsupported sort field {sort_field!r}. Allowed: {sorted(SORT_COLUMNS)}.")

        stmt = select(Streamer).order_by(column.desc() if descending else column.asc())
        needle = (query or "").strip()
        if needle:
            pattern = f"%{needle}%"
            stmt = stmt.where(or_(Streamer.name.ilike(pattern), Streamer.streamer_id.ilike(pattern)))
        return list(self._session.scalars(stmt).all())

    def search(self, query: str) -> list[Streamer]:
        """Name or streamer ID substring matches, best earners first."""
        return self.list_all(query=query)

    def list_refs(self) -> list[StreamerRef]:
        """
        Snapshot of every (name, streamer_id) pair for import reconciliation.
        """

        rows = self._session.execute(select(Streamer.name, Streamer.streamer_id)).all()
        return [StreamerRef(name=name, streamer_id=streamer_id) for name, streamer_id in rows]

    def get(self, streamer_uuid: uuid.UUID) -> Streamer:
        streamer = self._session.get(Streamer, streamer_uuid)
        if streamer is None:
            raise StreamerNotFoundError(f"Streamer not found: {streamer_uuid}")
        return streamer

    def get_by_streamer_id(self, streamer_id: str) -> Streamer:
        streamer = self._session.scalars(
            select(Streamer).where(Streamer.streamer_id == streamer_id).limit(1)
        ).first()
        if streamer is None:
            raise StreamerNotFoundError(f"Streamer not found: {streamer_id}")
        return streamer

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, data: StreamerInput) -> Streamer:
        self._ensure_unique(streamer_id=data.streamer_id, name=data.name)
        streamer = Streamer(
            streamer_id=data.streamer_id,
            name=data.name,
            luck_gifts=data.luck_gifts,
            exclusive_gifts=data.exclusive_gifts,
            host_crystals=data.host_crystals,
            minutes=data.minutes,
            effective_days=data.effective_days,
        )
        self._session.add(streamer)
        self._session.flush()
        return streamer

    def update(self, streamer_uuid: uuid.UUID, data: StreamerInput) -> Streamer:
        streamer = self.get(streamer_uuid)
        self._ensure_unique(streamer_id=data.streamer_id, name=data.name, exclude=streamer_uuid)
        streamer.streamer_id = data.streamer_id
        streamer.name = data.name
        streamer.luck_gifts = data.luck_gifts
        streamer.exclusive_gifts = data.exclusive_gifts
        streamer.host_crystals = data.host_crystals
        streamer.minutes = data.minutes
        streamer.effective_days = data.effective_days
        self._session.flush()
        return streamer

    def apply_counters(self, update: CounterUpdate) -> Streamer:
        streamer = self.get_by_streamer_id(update.streamer_id)
        streamer.luck_gifts = update.luck_gifts
        streamer.exclusive_gifts = update.exclusive_gifts
        streamer.minutes = update.minutes
        if update.effective_days is not None:
            streamer.effective_days = update.effective_days
        self._session.flush()
        return streamer

    def delete(self, streamer_uuid: uuid.UUID) -> None:
        self._session.delete(self.get(streamer_uuid))
        self._session.flush()

    def _ensure_unique(
        self,
        *,
        streamer_id: str,
        name: str,
        exclude: uuid.UUID | None = None,
    ) -> None:
        stmt = select(Streamer.id).where(
            or_(Streamer.streamer_id == streamer_id, Streamer.name == name)
        )
        if exclude is not None:
            stmt = stmt.where(Streamer.id != exclude)
        if self._session.scalars(stmt.limit(1)).first() is not None:
            raise DuplicateStreamerError(
                f"A streamer with ID {streamer_id!r} or name {name!r} already exists."
            )
