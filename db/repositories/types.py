"""
Typed DTOs used by the streamer and snapshot repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class StreamerInput:
    """
    Full field set for creating or replacing one streamer profile.
    """

    streamer_id: str
    name: str
    luck_gifts: int = 0
    exclusive_gifts: int = 0
    host_crystals: int = 0
    minutes: int = 0
    effective_days: int = 0


@dataclass(frozen=True)
class CounterUpdate:
    """
    Gift/time counters applied to an existing streamer by a batch update.

    ``effective_days`` is left untouched when None.
    """

    streamer_id: str
    luck_gifts: int
    exclusive_gifts: int
    minutes: int
    effective_days: int | None = None


@dataclass(frozen=True)
class SnapshotInput:
    """
    Fully computed snapshot payload ready for insertion.
    """

    period_type: str
    period_label: str
    snapshot_date: date
    total_crystals: int
    total_host_usd: float
    total_agency_usd: float
    streamer_count: int
    data: list[dict[str, Any]] = field(default_factory=list)
