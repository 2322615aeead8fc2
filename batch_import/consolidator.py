"""
batch_import/consolidator.py

Duplicate-ID consolidator for raw per-day gift-update pastes.

Rows sharing an identifier are folded into one aggregate in a single pass.
The fold keys an ``OrderedDict`` by identifier, so consolidated entries come
out in first-seen order regardless of hashing. Invalid entries pass through
untouched after the consolidated ones.

Valid-day policy
----------------
A contributing row counts as an effective day when its own ``minutes`` is at
least ``VALID_DAY_MINUTES`` (2 hours). ``days_count`` counts every row;
``valid_days_count`` counts only effective days. Summed counters never depend
on the threshold.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass

from batch_import.types import ParsedGiftUpdate

VALID_DAY_MINUTES = 120


def is_valid_day(minutes: int, *, threshold: int = VALID_DAY_MINUTES) -> bool:
    """Return True when one day's airtime meets the minimum-activity threshold."""
    return minutes >= threshold


@dataclass
class _Accumulator:
    streamer_id: str
    streamer_name: str | None
    luck_gifts: int
    exclusive_gifts: int
    minutes: int
    days_count: int
    valid_days_count: int

    def to_entry(self) -> ParsedGiftUpdate:
        return ParsedGiftUpdate(
            streamer_id=self.streamer_id,
            luck_gifts=self.luck_gifts,
            exclusive_gifts=self.exclusive_gifts,
            minutes=self.minutes,
            is_valid=True,
            streamer_name=self.streamer_name,
            days_count=self.days_count,
            valid_days_count=self.valid_days_count,
        )


def consolidate_gift_updates(
    entries: Sequence[ParsedGiftUpdate],
    *,
    valid_day_minutes: int = VALID_DAY_MINUTES,
) -> list[ParsedGiftUpdate]:
    """
    Merge valid entries sharing an identifier into one entry per identifier.

    Counters are summed with integer arithmetic and ``days_count`` is the
    number of contributing rows. Output order: consolidated entries by first
    sight of their identifier, then invalid entries in input order.
    """

    accumulators: OrderedDict[str, _Accumulator] = OrderedDict()
    invalid: list[ParsedGiftUpdate] = []

    for entry in entries:
        if not entry.is_valid:
            invalid.append(entry)
            continue

        valid_day = 1 if is_valid_day(entry.minutes, threshold=valid_day_minutes) else 0
        accumulator = accumulators.get(entry.streamer_id)
        if accumulator is None:
            accumulators[entry.streamer_id] = _Accumulator(
                streamer_id=entry.streamer_id,
                streamer_name=entry.streamer_name,
                luck_gifts=entry.luck_gifts,
                exclusive_gifts=entry.exclusive_gifts,
                minutes=entry.minutes,
                days_count=1,
                valid_days_count=valid_day,
            )
            continue

        accumulator.luck_gifts += entry.luck_gifts
        accumulator.exclusive_gifts += entry.exclusive_gifts
        accumulator.minutes += entry.minutes
        accumulator.days_count += 1
        accumulator.valid_days_count += valid_day

    return [accumulator.to_entry() for accumulator in accumulators.values()] + invalid
