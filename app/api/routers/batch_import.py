"""
app/api/routers/batch_import.py

Batch import HTTP endpoints: preview pasted, uploaded or shared-spreadsheet
text, then commit the valid entries.
"""

from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_import_upload_text,
    get_spreadsheet_fetcher,
    get_streamer_repository,
)
from app.connectors.spreadsheet_export import (
    SpreadsheetExportFetcher,
    SpreadsheetFetchError,
    SpreadsheetUrlError,
)
from app.schemas.batch_import import (
    BatchImportResultResponse,
    BatchTextRequest,
    GiftUpdateCommitRequest,
    GiftUpdatePreviewResponse,
    GiftUpdateTextRequest,
    ImportSummaryResponse,
    RegistrationCommitRequest,
    RegistrationPreviewResponse,
    SpreadsheetImportRequest,
    gift_update_from_request,
    gift_update_to_response,
    registration_from_request,
    registration_to_response,
)
from app.services.batch_import_service import (
    BatchImportInputError,
    BatchImportService,
    get_batch_import_service,
)
from app.services.upload_decoder import csv_to_text
from batch_import import ImportMode, UpdateSubMode
from db.repositories.streamer_repository import StreamerRepository
from db.session import get_db

router = APIRouter(prefix="/streamers", tags=["batch-import"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _preview_registrations(
    text: str,
    service: BatchImportService,
    repository: StreamerRepository,
) -> RegistrationPreviewResponse:
    try:
        preview = service.preview_registrations(text, repository.list_refs())
    except BatchImportInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RegistrationPreviewResponse(
        entries=[registration_to_response(entry) for entry in preview.entries],
        summary=ImportSummaryResponse.from_summary(preview.summary),
    )


def _preview_gift_updates(
    text: str,
    sub_mode: UpdateSubMode,
    service: BatchImportService,
    repository: StreamerRepository,
) -> GiftUpdatePreviewResponse:
    try:
        preview = service.preview_gift_updates(text, repository.list_refs(), sub_mode=sub_mode)
    except BatchImportInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return GiftUpdatePreviewResponse(
        sub_mode=sub_mode,
        entries=[gift_update_to_response(entry) for entry in preview.entries],
        summary=ImportSummaryResponse.from_summary(preview.summary),
    )


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


@router.post("/import/preview", response_model=RegistrationPreviewResponse)
def preview_registration_text(
    body: BatchTextRequest,
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> RegistrationPreviewResponse:
    return _preview_registrations(body.text, service, repository)


@router.post("/import/preview/file", response_model=RegistrationPreviewResponse)
def preview_registration_file(
    text: str = Depends(get_import_upload_text),
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> RegistrationPreviewResponse:
    return _preview_registrations(text, service, repository)


@router.post("/import", response_model=BatchImportResultResponse)
def commit_registrations(
    body: RegistrationCommitRequest,
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
    db: Session = Depends(get_db),
) -> BatchImportResultResponse:
    """
    Create the valid entries one by one; failures are reported, not raised.
    """

    result = service.commit_registrations(
        [registration_from_request(entry) for entry in body.entries],
        repository=repository,
        db=db,
    )
    return BatchImportResultResponse.from_result(result)


@router.post(
    "/import/spreadsheet",
    response_model=RegistrationPreviewResponse | GiftUpdatePreviewResponse,
)
def preview_spreadsheet(
    body: SpreadsheetImportRequest,
    fetcher: SpreadsheetExportFetcher = Depends(get_spreadsheet_fetcher),
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> RegistrationPreviewResponse | GiftUpdatePreviewResponse:
    """
    Fetch a shared spreadsheet's CSV export and preview it.
    """

    try:
        exported = fetcher.fetch_text(body.url)
    except SpreadsheetUrlError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SpreadsheetFetchError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    try:
        text = csv_to_text(exported)
    except BatchImportInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if body.mode is ImportMode.UPDATE:
        return _preview_gift_updates(text, body.sub_mode, service, repository)
    return _preview_registrations(text, service, repository)


# ---------------------------------------------------------------------------
# Gift updates
# ---------------------------------------------------------------------------


@router.post("/gift-updates/preview", response_model=GiftUpdatePreviewResponse)
def preview_gift_update_text(
    body: GiftUpdateTextRequest,
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> GiftUpdatePreviewResponse:
    return _preview_gift_updates(body.text, body.sub_mode, service, repository)


@router.post("/gift-updates/preview/file", response_model=GiftUpdatePreviewResponse)
def preview_gift_update_file(
    sub_mode: UpdateSubMode = Query(default=UpdateSubMode.UNIQUE),
    text: str = Depends(get_import_upload_text),
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> GiftUpdatePreviewResponse:
    return _preview_gift_updates(text, sub_mode, service, repository)


@router.post("/gift-updates", response_model=BatchImportResultResponse)
def commit_gift_updates(
    body: GiftUpdateCommitRequest,
    service: BatchImportService = Depends(get_batch_import_service),
    repository: StreamerRepository = Depends(get_streamer_repository),
    db: Session = Depends(get_db),
) -> BatchImportResultResponse:
    entries = [gift_update_from_request(entry) for entry in body.entries]
    if body.sub_mode is UpdateSubMode.UNIQUE:
        # effective_days is only rewritten from consolidated day counts.
        entries = [replace(entry, days_count=None, valid_days_count=None) for entry in entries]
    result = service.commit_gift_updates(entries, repository=repository, db=db)
    return BatchImportResultResponse.from_result(result)
