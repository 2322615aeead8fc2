"""
kpi/dashboard.py

Dashboard aggregations over live streamer records and stored snapshots.

Realtime view: totals over the current streamer records.
Month/Year view: per-streamer sums over every snapshot in the period,
                 keyed by ``streamer_id`` in first-seen order.
Growth series: host and agency USD per calendar month of one year.

Pure functions only; callers load records and snapshots beforehand.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Protocol

from kpi.formatting import calculate_agency_usd, calculate_host_usd

MONTH_NAMES: tuple[str, ...] = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)
MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)


class StreamerRecord(Protocol):
    streamer_id: str
    name: str
    luck_gifts: int
    exclusive_gifts: int
    host_crystals: int
    minutes: int
    effective_days: int


class SnapshotRecord(Protocol):
    snapshot_date: date | datetime | str
    data: Sequence[Mapping[str, Any]]
    total_host_usd: float
    total_agency_usd: float


@dataclass
class AggregatedStreamerData:
    streamer_id: str
    name: str
    luck_gifts: int = 0
    exclusive_gifts: int = 0
    host_crystals: int = 0
    host_usd: float = 0.0
    agency_usd: float = 0.0
    minutes: int = 0
    effective_days: int = 0


@dataclass(frozen=True)
class DashboardStats:
    total_crystals: int = 0
    total_luck_gifts: int = 0
    total_exclusive_gifts: int = 0
    total_host_usd: float = 0.0
    total_agency_usd: float = 0.0
    streamer_count: int = 0
    streamers: list[AggregatedStreamerData] = field(default_factory=list)


@dataclass(frozen=True)
class PeriodOption:
    value: str
    label: str


@dataclass(frozen=True)
class MonthlyGrowthPoint:
    month: str
    revenue: float
    agency: float


def get_realtime_stats(streamers: Iterable[StreamerRecord]) -> DashboardStats:
    """
    Totals over the live streamer records.
    """

    rows = [
        AggregatedStreamerData(
            streamer_id=s.streamer_id,
            name=s.name,
            luck_gifts=s.luck_gifts,
            exclusive_gifts=s.exclusive_gifts,
            host_crystals=s.host_crystals,
            host_usd=calculate_host_usd(s.host_crystals),
            agency_usd=calculate_agency_usd(s.host_crystals),
            minutes=s.minutes,
            effective_days=s.effective_days,
        )
        for s in streamers
    ]
    return _stats_from_rows(rows)


def aggregate_snapshots(snapshots: Iterable[SnapshotRecord]) -> DashboardStats:
    """
    Sum every snapshot row per ``streamer_id``; name comes from first sight.
    """

    by_id: OrderedDict[str, AggregatedStreamerData] = OrderedDict()
    for snapshot in snapshots:
        for row in snapshot.data:
            streamer_id = str(row["streamer_id"])
            current = by_id.get(streamer_id)
            if current is None:
                current = AggregatedStreamerData(streamer_id=streamer_id, name=str(row.get("name", "")))
                by_id[streamer_id] = current
            current.luck_gifts += int(row.get("luck_gifts", 0))
            current.exclusive_gifts += int(row.get("exclusive_gifts", 0))
            current.host_crystals += int(row.get("host_crystals", 0))
            current.host_usd += float(row.get("host_usd", 0.0))
            current.agency_usd += float(row.get("agency_usd", 0.0))
            current.minutes += int(row.get("minutes", 0))
            current.effective_days += int(row.get("effective_days", 0))

    return _stats_from_rows(list(by_id.values()))


def get_available_months(snapshots: Iterable[SnapshotRecord]) -> list[PeriodOption]:
    """
    Distinct ``YYYY-MM`` keys with Portuguese labels, most recent first.
    """

    labels: dict[str, str] = {}
    for snapshot in snapshots:
        day = _as_date(snapshot.snapshot_date)
        labels[_month_key(day)] = f"{MONTH_NAMES[day.month - 1]} {day.year}"
    return [PeriodOption(value=key, label=labels[key]) for key in sorted(labels, reverse=True)]


def get_available_years(snapshots: Iterable[SnapshotRecord]) -> list[PeriodOption]:
    years = {str(_as_date(snapshot.snapshot_date).year) for snapshot in snapshots}
    return [PeriodOption(value=year, label=year) for year in sorted(years, reverse=True)]


def filter_snapshots_by_month(
    snapshots: Iterable[SnapshotRecord],
    month_key: str,
) -> list[SnapshotRecord]:
    return [s for s in snapshots if _month_key(_as_date(s.snapshot_date)) == month_key]


def filter_snapshots_by_year(
    snapshots: Iterable[SnapshotRecord],
    year: str,
) -> list[SnapshotRecord]:
    return [s for s in snapshots if str(_as_date(s.snapshot_date).year) == year]


def get_monthly_growth_data(
    snapshots: Iterable[SnapshotRecord],
    year: str,
) -> list[MonthlyGrowthPoint]:
    """
    Twelve points (Jan..Dez) summing snapshot host and agency USD for *year*.

    Months without snapshots report zero.
    """

    revenue = [0.0] * 12
    agency = [0.0] * 12
    for snapshot in filter_snapshots_by_year(snapshots, year):
        month_index = _as_date(snapshot.snapshot_date).month - 1
        revenue[month_index] += snapshot.total_host_usd
        agency[month_index] += snapshot.total_agency_usd

    return [
        MonthlyGrowthPoint(month=name, revenue=revenue[index], agency=agency[index])
        for index, name in enumerate(MONTH_ABBREVIATIONS)
    ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _stats_from_rows(rows: list[AggregatedStreamerData]) -> DashboardStats:
    return DashboardStats(
        total_crystals=sum(row.host_crystals for row in rows),
        total_luck_gifts=sum(row.luck_gifts for row in rows),
        total_exclusive_gifts=sum(row.exclusive_gifts for row in rows),
        total_host_usd=sum(row.host_usd for row in rows),
        total_agency_usd=sum(row.agency_usd for row in rows),
        streamer_count=len(rows),
        streamers=rows,
    )


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"
