"""
app/api/routers/export.py

Export endpoint: live streamers or one stored snapshot, rendered as
WhatsApp-ready text, CSV, XLSX or a JSON table preview.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_snapshot_repository, get_streamer_repository
from app.services.export_service import (
    ExportOptions,
    ExportService,
    SpreadsheetPreview,
    export_filename,
    get_export_service,
)
from db.repositories.errors import SnapshotNotFoundError
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.streamer_repository import DEFAULT_SORT_FIELD, StreamerRepository

router = APIRouter(tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_export_options(
    include_ranking: bool = True,
    include_name: bool = True,
    include_id: bool = True,
    include_luck_gifts: bool = True,
    include_exclusive_gifts: bool = True,
    include_host_crystals: bool = True,
    include_host_usd: bool = True,
    include_agency_usd: bool = True,
    include_hours: bool = True,
    include_days: bool = True,
) -> ExportOptions:
    return ExportOptions(
        include_ranking=include_ranking,
        include_name=include_name,
        include_id=include_id,
        include_luck_gifts=include_luck_gifts,
        include_exclusive_gifts=include_exclusive_gifts,
        include_host_crystals=include_host_crystals,
        include_host_usd=include_host_usd,
        include_agency_usd=include_agency_usd,
        include_hours=include_hours,
        include_days=include_days,
    )


@router.get("/export", response_model=None)
def export_streamers(
    format: Literal["text", "csv", "xlsx", "json"] = Query(default="text"),
    style: Literal["compact", "block"] = Query(default="compact", description="Layout of text exports"),
    snapshot_id: uuid.UUID | None = Query(default=None, description="Export a stored snapshot instead"),
    sort: str = Query(default=DEFAULT_SORT_FIELD),
    direction: Literal["asc", "desc"] = Query(default="desc"),
    options: ExportOptions = Depends(get_export_options),
    service: ExportService = Depends(get_export_service),
    streamers: StreamerRepository = Depends(get_streamer_repository),
    snapshots: SnapshotRepository = Depends(get_snapshot_repository),
) -> Response | SpreadsheetPreview:
    if snapshot_id is not None:
        try:
            rows = service.rows_from_snapshot_data(snapshots.get(snapshot_id).data)
        except SnapshotNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    else:
        rows = service.rows_from_streamers(streamers.list_all())

    try:
        rows = service.sort_rows(rows, sort_field=sort, descending=direction == "desc")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    filename = export_filename(datetime.now(tz=timezone.utc).date())

    if format == "json":
        return service.format_spreadsheet_preview(rows, options)
    if format == "csv":
        return Response(
            content=service.to_csv(rows, options),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}.csv"'},
        )
    if format == "xlsx":
        return Response(
            content=service.to_xlsx(rows, options),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}.xlsx"'},
        )

    text = (
        service.format_text_block(rows, options)
        if style == "block"
        else service.format_compact_lines(rows, options)
    )
    return PlainTextResponse(text)
