"""
app/schemas package marker.
"""

from app.schemas.batch_import import (
    BatchImportResultResponse,
    GiftUpdatePreviewResponse,
    ImportSummaryResponse,
    RegistrationPreviewResponse,
)
from app.schemas.dashboard import DashboardResponse, GrowthResponse
from app.schemas.snapshots import SnapshotListResponse, SnapshotResponse
from app.schemas.streamers import StreamerListResponse, StreamerResponse, StreamerWriteRequest

__all__ = [
    "BatchImportResultResponse",
    "DashboardResponse",
    "GiftUpdatePreviewResponse",
    "GrowthResponse",
    "ImportSummaryResponse",
    "RegistrationPreviewResponse",
    "SnapshotListResponse",
    "SnapshotResponse",
    "StreamerListResponse",
    "StreamerResponse",
    "StreamerWriteRequest",
]
