"""
app/api/routers/snapshots.py

Snapshot history endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_snapshot_repository, get_streamer_repository
from app.schemas.snapshots import SnapshotCreateRequest, SnapshotListResponse, SnapshotResponse
from app.services.snapshot_service import SnapshotService, default_period_label, get_snapshot_service
from db.repositories.errors import SnapshotExistsError, SnapshotNotFoundError
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.streamer_repository import StreamerRepository
from db.session import get_db

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


@router.get("", response_model=SnapshotListResponse)
def list_snapshots(
    period_type: str | None = Query(default=None, description="weekly | monthly | yearly"),
    repository: SnapshotRepository = Depends(get_snapshot_repository),
) -> SnapshotListResponse:
    snapshots = repository.list_by_period(period_type) if period_type else repository.list_all()
    return SnapshotListResponse(snapshots=[SnapshotResponse.model_validate(s) for s in snapshots])


@router.post("", response_model=SnapshotResponse, status_code=status.HTTP_201_CREATED)
def create_snapshot(
    body: SnapshotCreateRequest,
    service: SnapshotService = Depends(get_snapshot_service),
    streamers: StreamerRepository = Depends(get_streamer_repository),
    repository: SnapshotRepository = Depends(get_snapshot_repository),
    db: Session = Depends(get_db),
) -> SnapshotResponse:
    """
    Freeze the current streamer counters into a period snapshot.

    Raises HTTP 409 when the period type and label were already saved.
    """

    label = body.period_label or default_period_label(
        body.period_type,
        datetime.now(tz=timezone.utc).date(),
    )
    try:
        snapshot = service.create_snapshot(
            period_type=body.period_type,
            period_label=label,
            streamers=streamers.list_all(),
            repository=repository,
            db=db,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SnapshotExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return SnapshotResponse.model_validate(snapshot)


@router.delete("/{snapshot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_snapshot(
    snapshot_id: uuid.UUID,
    repository: SnapshotRepository = Depends(get_snapshot_repository),
    db: Session = Depends(get_db),
) -> None:
    try:
        repository.delete(snapshot_id)
        db.commit()
    except SnapshotNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
