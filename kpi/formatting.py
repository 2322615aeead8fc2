"""
kpi/formatting.py

Derived-metric formulas and presentation formatters.

Shared by the import preview and the export path. Values end up in exported
financial documents, so every function here is deterministic:

Host USD    = host_crystals / 10000
Agency USD  = (host_crystals * 0.1) / 10000
Hours       = floor(minutes / 60) ":" two-digit (minutes % 60)

Display helpers never feed back into arithmetic.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

CRYSTALS_PER_USD = 10000
AGENCY_SHARE = 0.1

_NON_NUMERIC = re.compile(r"[^\d-]")
_LEADING_INTEGER = re.compile(r"-?\d+")


def calculate_host_usd(host_crystals: int | float) -> float:
    """Host USD = host_crystals / 10000."""
    return host_crystals / CRYSTALS_PER_USD


def calculate_agency_usd(host_crystals: int | float) -> float:
    """Agency USD = (host_crystals * 0.1) / 10000."""
    return (host_crystals * AGENCY_SHARE) / CRYSTALS_PER_USD


def format_minutes_to_hours(minutes: int) -> str:
    """
    Render minutes as ``H:MM``; ``1500`` gives ``"25:00"``.
    """

    hours, remainder = divmod(int(minutes), 60)
    return f"{hours}:{remainder:02d}"


def format_number(value: int | float) -> str:
    """
    Group thousands the pt-BR way: ``1234567`` gives ``"1.234.567"``.

    Fractions, when present, use a comma and at most three digits.
    """

    if isinstance(value, float) and not value.is_integer():
        rounded = f"{value:,.3f}".rstrip("0").rstrip(".")
        return rounded.translate(str.maketrans({",": ".", ".": ","}))
    return f"{int(value):,}".replace(",", ".")


def format_currency(value: float) -> str:
    """
    Render a USD amount with two decimals: ``1.5`` gives ``"$1.50"``.

    Rounds half-up on the exact binary value of *value*, which keeps the
    output identical to the amounts already printed in past exports.
    """

    amount = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${amount}"


def parse_formatted_number(text: str | None) -> int:
    """
    Parse a user-typed count such as ``"15.000"`` or ``"1,500 min"``.

    Everything except digits and ``-`` is dropped; unparseable input is 0.
    """

    if not text:
        return 0
    match = _LEADING_INTEGER.match(_NON_NUMERIC.sub("", text))
    return int(match.group(0)) if match else 0
