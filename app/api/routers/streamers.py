"""
app/api/routers/streamers.py

Streamer profile CRUD endpoints.
"""

from __future__ import annotations

import logging
import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_streamer_repository
from app.schemas.streamers import StreamerListResponse, StreamerResponse, StreamerWriteRequest
from db.repositories.errors import DuplicateStreamerError, StreamerNotFoundError
from db.repositories.streamer_repository import DEFAULT_SORT_FIELD, StreamerRepository
from db.repositories.types import StreamerInput
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/streamers", tags=["streamers"])


@router.get("", response_model=StreamerListResponse)
def list_streamers(
    q: str | None = Query(default=None, description="Name or ID substring"),
    sort: str = Query(default=DEFAULT_SORT_FIELD),
    direction: Literal["asc", "desc"] = Query(default="desc"),
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> StreamerListResponse:
    try:
        streamers = repository.list_all(sort_field=sort, descending=direction == "desc", query=q)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return StreamerListResponse(
        streamers=[StreamerResponse.from_record(s) for s in streamers],
        count=len(streamers),
    )


@router.post("", response_model=StreamerResponse, status_code=status.HTTP_201_CREATED)
def create_streamer(
    body: StreamerWriteRequest,
    repository: StreamerRepository = Depends(get_streamer_repository),
    db: Session = Depends(get_db),
) -> StreamerResponse:
    """
    Create a streamer. Raises HTTP 409 when the ID or name is taken.
    """

    try:
        streamer = repository.create(StreamerInput(**body.model_dump()))
        db.commit()
    except DuplicateStreamerError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    logger.info("Streamer created streamer_id=%s", streamer.streamer_id)
    return StreamerResponse.from_record(streamer)


@router.get("/{streamer_uuid}", response_model=StreamerResponse)
def get_streamer(
    streamer_uuid: uuid.UUID,
    repository: StreamerRepository = Depends(get_streamer_repository),
) -> StreamerResponse:
    try:
        return StreamerResponse.from_record(repository.get(streamer_uuid))
    except StreamerNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/{streamer_uuid}", response_model=StreamerResponse)
def update_streamer(
    streamer_uuid: uuid.UUID,
    body: StreamerWriteRequest,
    repository: StreamerRepository = Depends(get_streamer_repository),
    db: Session = Depends(get_db),
) -> StreamerResponse:
    try:
        streamer = repository.update(streamer_uuid, StreamerInput(**body.model_dump()))
        db.commit()
    except StreamerNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DuplicateStreamerError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return StreamerResponse.from_record(streamer)


@router.delete("/{streamer_uuid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_streamer(
    streamer_uuid: uuid.UUID,
    repository: StreamerRepository = Depends(get_streamer_repository),
    db: Session = Depends(get_db),
) -> None:
    try:
        repository.delete(streamer_uuid)
        db.commit()
    except StreamerNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    logger.info("Streamer deleted id=%s", streamer_uuid)
