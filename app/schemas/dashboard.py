"""
app/schemas/dashboard.py

Response schemas for dashboard endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AggregatedStreamerResponse(BaseModel):
    streamer_id: str
    name: str
    luck_gifts: int
    exclusive_gifts: int
    host_crystals: int
    host_usd: float
    agency_usd: float
    minutes: int
    effective_days: int

    model_config = {"from_attributes": True}


class PeriodOptionResponse(BaseModel):
    value: str
    label: str

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    view: str
    period: str | None = None
    total_crystals: int
    total_luck_gifts: int
    total_exclusive_gifts: int
    total_host_usd: float
    total_agency_usd: float
    streamer_count: int
    streamers: list[AggregatedStreamerResponse] = Field(default_factory=list)
    available_months: list[PeriodOptionResponse] = Field(default_factory=list)
    available_years: list[PeriodOptionResponse] = Field(default_factory=list)


class MonthlyGrowthPointResponse(BaseModel):
    month: str
    revenue: float
    agency: float

    model_config = {"from_attributes": True}


class GrowthResponse(BaseModel):
    year: str
    points: list[MonthlyGrowthPointResponse] = Field(default_factory=list)
