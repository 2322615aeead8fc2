"""
batch_import/types.py

Value objects produced by the batch-import engine.

Every object here is created fresh for one import invocation and never
persisted. Invalid entries are kept alongside valid ones so callers can show
the full audit trail of a paste.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ImportMode(str, Enum):
    """Which kind of paste is being parsed."""

    REGISTER = "register"
    UPDATE = "update"


class UpdateSubMode(str, Enum):
    """
    Whether each identifier appears once (already aggregated data) or
    several times (raw per-day rows that must be consolidated).
    """

    UNIQUE = "unique"
    DUPLICATE = "duplicate"


class ImportAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class ImportErrorKind(str, Enum):
    """
    Data-quality outcome attached to an invalid entry.

    These are never raised; they only classify the ``error`` message.
    """

    FORMAT_ERROR = "format_error"
    DUPLICATE_IN_EXISTING = "duplicate_in_existing"
    DUPLICATE_IN_BATCH = "duplicate_in_batch"


@dataclass(frozen=True)
class StreamerRef:
    """
    Minimal streamer identity used for duplicate checks.

    ``streamer_id`` is opaque to the engine; only the numeric-detection
    heuristics assume it looks numeric.
    """

    name: str
    streamer_id: str


@dataclass(frozen=True)
class GiftCounters:
    """
    Counters extracted from one gift-update line before reconciliation.
    """

    streamer_id: str
    luck_gifts: int
    exclusive_gifts: int
    minutes: int


@dataclass(frozen=True)
class ParsedRegistration:
    """
    One registration line after parsing and reconciliation.
    """

    name: str
    streamer_id: str
    is_valid: bool
    error: str | None = None
    error_kind: ImportErrorKind | None = None
    action: ImportAction | None = None

    def to_ref(self) -> StreamerRef:
        return StreamerRef(name=self.name, streamer_id=self.streamer_id)


@dataclass(frozen=True)
class ParsedGiftUpdate:
    """
    One gift-update line after parsing and reconciliation.

    ``days_count`` and ``valid_days_count`` are only populated by the
    duplicate-ID consolidator.
    """

    streamer_id: str
    luck_gifts: int
    exclusive_gifts: int
    minutes: int
    is_valid: bool
    error: str | None = None
    error_kind: ImportErrorKind | None = None
    streamer_name: str | None = None
    days_count: int | None = None
    valid_days_count: int | None = None


@dataclass(frozen=True)
class ImportSummary:
    """
    Tally of valid and invalid entries; derived, never stored.
    """

    valid: int
    invalid: int

    @property
    def total(self) -> int:
        return self.valid + self.invalid
