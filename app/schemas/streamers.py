"""
app/schemas/streamers.py

Request and response schemas for streamer profile endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from kpi.formatting import calculate_agency_usd, calculate_host_usd


class StreamerWriteRequest(BaseModel):
    """
    Full field set for creating or replacing one streamer.
    """

    streamer_id: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=255)
    luck_gifts: int = Field(default=0, ge=0)
    exclusive_gifts: int = Field(default=0, ge=0)
    host_crystals: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0)
    effective_days: int = Field(default=0, ge=0)


class StreamerResponse(BaseModel):
    id: uuid.UUID
    streamer_id: str
    name: str
    luck_gifts: int
    exclusive_gifts: int
    host_crystals: int
    minutes: int
    effective_days: int
    host_usd: float = 0.0
    agency_usd: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_record(cls, record: object) -> "StreamerResponse":
        response = cls.model_validate(record)
        return response.model_copy(
            update={
                "host_usd": calculate_host_usd(response.host_crystals),
                "agency_usd": calculate_agency_usd(response.host_crystals),
            }
        )


class StreamerListResponse(BaseModel):
    streamers: list[StreamerResponse] = Field(default_factory=list)
    count: int = Field(..., ge=0)
