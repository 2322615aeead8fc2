"""
Repository layer exports.
"""

from db.repositories.errors import (
    DuplicateStreamerError,
    SnapshotExistsError,
    SnapshotNotFoundError,
    StreamerNotFoundError,
    StreamerRepositoryError,
)
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.streamer_repository import SORT_COLUMNS, StreamerRepository
from db.repositories.types import CounterUpdate, SnapshotInput, StreamerInput

__all__ = [
    "CounterUpdate",
    "DuplicateStreamerError",
    "SORT_COLUMNS",
    "SnapshotExistsError",
    "SnapshotInput",
    "SnapshotNotFoundError",
    "SnapshotRepository",
    "StreamerInput",
    "StreamerNotFoundError",
    "StreamerRepository",
    "StreamerRepositoryError",
]
