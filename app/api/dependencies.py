"""
app/api/dependencies.py

Shared FastAPI dependencies for repositories and upload decoding.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import BatchImportSettings, get_batch_import_settings, get_spreadsheet_fetch_settings
from app.connectors.spreadsheet_export import SpreadsheetExportFetcher
from app.services.batch_import_service import BatchImportDecodeError
from app.services.upload_decoder import decode_upload
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.streamer_repository import StreamerRepository
from db.session import get_db


def get_streamer_repository(db: Session = Depends(get_db)) -> StreamerRepository:
    return StreamerRepository(db)


def get_snapshot_repository(db: Session = Depends(get_db)) -> SnapshotRepository:
    return SnapshotRepository(db)


@lru_cache(maxsize=1)
def get_spreadsheet_fetcher() -> SpreadsheetExportFetcher:
    return SpreadsheetExportFetcher(http_settings=get_spreadsheet_fetch_settings())


def get_import_upload_text(
    file: UploadFile = File(...),
    settings: BatchImportSettings = Depends(get_batch_import_settings),
) -> str:
    """
    Decode an uploaded .txt/.csv/.tsv/.xlsx/.xls file into import text.
    """

    try:
        payload = file.file.read(settings.max_upload_bytes + 1)
        return decode_upload(file.filename, payload, max_bytes=settings.max_upload_bytes)
    except BatchImportDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()
