"""
kpi/base.py

Abstract base class for streamer KPI formula implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseKPIFormula(ABC):
    """
    Contract for KPI formula implementations.

    Subclasses receive a plain dictionary of per-streamer counters and must
    return a plain dictionary of derived metric values.

    No I/O, no logging, and no side effects are permitted inside
    :meth:`calculate`.
    """

    @abstractmethod
    def calculate(self, inputs: dict[str, Any]) -> dict[str, Any]:
        """
        Compute KPI metrics from *inputs* and return a result dictionary.

        Parameters
        ----------
        inputs:
            Counters of one streamer (crystals, gifts, minutes, days).

        Returns
        -------
        dict[str, Any]
            Computed metrics keyed by metric name.
        """
