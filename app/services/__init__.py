"""
app/services package marker.
"""

from app.services.batch_import_service import (
    BatchImportDecodeError,
    BatchImportInputError,
    BatchImportService,
    ImportPreview,
    get_batch_import_service,
)
from app.services.export_service import ExportOptions, ExportService, get_export_service
from app.services.snapshot_service import SnapshotService, get_snapshot_service

__all__ = [
    "BatchImportDecodeError",
    "BatchImportInputError",
    "BatchImportService",
    "ExportOptions",
    "ExportService",
    "ImportPreview",
    "SnapshotService",
    "get_batch_import_service",
    "get_export_service",
    "get_snapshot_service",
]
