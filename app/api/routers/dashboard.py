"""
app/api/routers/dashboard.py

Dashboard endpoints: realtime totals, month/year aggregates over snapshots
and the monthly growth series.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_snapshot_repository, get_streamer_repository
from app.schemas.dashboard import (
    AggregatedStreamerResponse,
    DashboardResponse,
    GrowthResponse,
    MonthlyGrowthPointResponse,
    PeriodOptionResponse,
)
from db.repositories.snapshot_repository import SnapshotRepository
from db.repositories.streamer_repository import StreamerRepository
from kpi.dashboard import (
    aggregate_snapshots,
    filter_snapshots_by_month,
    filter_snapshots_by_year,
    get_available_months,
    get_available_years,
    get_monthly_growth_data,
    get_realtime_stats,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    view: Literal["realtime", "month", "year"] = Query(default="realtime"),
    period: str | None = Query(default=None, description="YYYY-MM for month, YYYY for year"),
    streamers: StreamerRepository = Depends(get_streamer_repository),
    snapshots: SnapshotRepository = Depends(get_snapshot_repository),
) -> DashboardResponse:
    """
    Without *period*, month and year views use the most recent available one.
    """

    history = snapshots.list_all()
    months = get_available_months(history)
    years = get_available_years(history)

    if view == "realtime":
        stats = get_realtime_stats(streamers.list_all())
        period = None
    elif view == "month":
        period = period or (months[0].value if months else None)
        stats = aggregate_snapshots(filter_snapshots_by_month(history, period) if period else [])
    else:
        period = period or (years[0].value if years else None)
        stats = aggregate_snapshots(filter_snapshots_by_year(history, period) if period else [])

    return DashboardResponse(
        view=view,
        period=period,
        total_crystals=stats.total_crystals,
        total_luck_gifts=stats.total_luck_gifts,
        total_exclusive_gifts=stats.total_exclusive_gifts,
        total_host_usd=stats.total_host_usd,
        total_agency_usd=stats.total_agency_usd,
        streamer_count=stats.streamer_count,
        streamers=[AggregatedStreamerResponse.model_validate(row) for row in stats.streamers],
        available_months=[PeriodOptionResponse.model_validate(option) for option in months],
        available_years=[PeriodOptionResponse.model_validate(option) for option in years],
    )


@router.get("/growth", response_model=GrowthResponse)
def get_growth(
    year: str | None = Query(default=None, pattern=r"^\d{4}$"),
    snapshots: SnapshotRepository = Depends(get_snapshot_repository),
) -> GrowthResponse:
    selected = year or str(datetime.now(tz=timezone.utc).year)
    points = get_monthly_growth_data(snapshots.list_all(), selected)
    return GrowthResponse(
        year=selected,
        points=[MonthlyGrowthPointResponse.model_validate(point) for point in points],
    )
