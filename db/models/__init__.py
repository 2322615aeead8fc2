"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.snapshot import PeriodType, Snapshot
from db.models.streamer import STREAMER_COUNTER_FIELDS, Streamer

__all__ = [
    "PeriodType",
    "Snapshot",
    "STREAMER_COUNTER_FIELDS",
    "Streamer",
]
