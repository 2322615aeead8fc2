"""
app/schemas/snapshots.py

Request and response schemas for snapshot endpoints.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class SnapshotCreateRequest(BaseModel):
    period_type: str = Field(..., description="weekly | monthly | yearly")
    period_label: str | None = Field(
        default=None,
        description="Defaults to a label derived from today's date",
    )


class SnapshotResponse(BaseModel):
    id: uuid.UUID
    period_type: str
    period_label: str
    snapshot_date: date
    total_crystals: int
    total_host_usd: float
    total_agency_usd: float
    streamer_count: int
    data: list[dict[str, Any]] = Field(default_factory=list)
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SnapshotListResponse(BaseModel):
    snapshots: list[SnapshotResponse] = Field(default_factory=list)
