"""
Repository-layer exceptions for the streamer record store.
"""

from __future__ import annotations


class StreamerRepositoryError(Exception):
    """Base exception for record store failures."""


class StreamerNotFoundError(StreamerRepositoryError):
    """Raised when a referenced streamer does not exist."""


class DuplicateStreamerError(StreamerRepositoryError):
    """Raised when another streamer already holds the ID or name."""


class SnapshotNotFoundError(StreamerRepositoryError):
    """Raised when a referenced snapshot does not exist."""


class SnapshotExistsError(StreamerRepositoryError):
    """Raised when a snapshot for the same period type and label exists."""
