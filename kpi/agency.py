"""
kpi/agency.py

Streamer earnings KPI formula for the agency.

Expected inputs
---------------
host_crystals : int
    Crystals credited to the streamer in the period.
luck_gifts : int
    Luck gifts received in the period.
exclusive_gifts : int
    Exclusive gifts received in the period.
minutes : int
    Airtime in minutes.
effective_days : int
    Days that met the minimum-activity threshold.

Formulas
--------
Host USD       = host_crystals / 10000
Agency USD     = (host_crystals * 0.1) / 10000
Hours Display  = floor(minutes / 60) ":" pad2(minutes % 60)
Average Minutes Per Effective Day = minutes / effective_days

Division-by-zero cases return None for the affected metric.
"""

from __future__ import annotations

from typing import Any

from kpi.base import BaseKPIFormula
from kpi.formatting import calculate_agency_usd, calculate_host_usd, format_minutes_to_hours

_SENTINEL = None  # value stored when a metric cannot be computed


class StreamerEarningsFormula(BaseKPIFormula):
    """
    Deterministic per-streamer earnings calculations.

    All arithmetic is self-contained.  No I/O, no logging, no side effects.
    """

    def calculate(self, inputs: dict[str, Any]) -> dict[str, Any]:
        """
        Compute host USD, agency USD, the hours display and average minutes
        per effective day from *inputs*.

        Parameters
        ----------
        inputs:
            Dictionary containing the keys listed in the module docstring.
            Missing counters default to zero.

        Returns
        -------
        dict
            Keys: ``host_usd``, ``agency_usd``, ``hours``,
            ``avg_minutes_per_day``.
        """
        host_crystals: int = inputs.get("host_crystals", 0)
        minutes: int = inputs.get("minutes", 0)
        effective_days: int = inputs.get("effective_days", 0)

        return {
            "host_usd": calculate_host_usd(host_crystals),
            "agency_usd": calculate_agency_usd(host_crystals),
            "hours": format_minutes_to_hours(minutes),
            "avg_minutes_per_day": _avg_minutes_per_day(minutes, effective_days),
        }


def _avg_minutes_per_day(minutes: int, effective_days: int) -> float | None:
    """
    Average Minutes Per Effective Day = minutes / effective_days.

    Returns None when effective_days is zero.
    """
    if effective_days == 0:
        return _SENTINEL
    return minutes / effective_days
