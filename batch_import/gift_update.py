"""
batch_import/gift_update.py

Gift-update-line parser: extracts (ID, luck gifts, exclusive gifts, minutes).

Counts are commonly pasted with thousands separators (``15.000`` or
``15,000``); both grouping characters are stripped before integer parsing.
"""

from __future__ import annotations

import re

from batch_import.tokenizer import candidate_fields, is_valid_streamer_id
from batch_import.types import GiftCounters, ImportMode

GIFT_UPDATE_FIELD_COUNT = 4

_GROUPING_SEPARATORS = re.compile(r"[.,]")
_DIGITS = re.compile(r"[0-9]+")
_DIGIT_GROUP = re.compile(r"[0-9]{3}")


def parse_count(value: str) -> int | None:
    """
    Parse a non-negative integer counter, ignoring ``.``/``,`` grouping.

    Returns ``None`` for anything else (signs, letters, empty strings).
    """

    cleaned = _GROUPING_SEPARATORS.sub("", value.strip())
    if not _DIGITS.fullmatch(cleaned):
        return None
    return int(cleaned)


def _counters_from_fields(fields: list[str]) -> GiftCounters | None:
    if len(fields) < GIFT_UPDATE_FIELD_COUNT:
        return None

    streamer_id = fields[0].strip()
    if not is_valid_streamer_id(streamer_id):
        return None

    luck_gifts = parse_count(fields[1])
    exclusive_gifts = parse_count(fields[2])
    minutes = parse_count(fields[3])
    if luck_gifts is None or exclusive_gifts is None or minutes is None:
        return None

    return GiftCounters(
        streamer_id=streamer_id,
        luck_gifts=luck_gifts,
        exclusive_gifts=exclusive_gifts,
        minutes=minutes,
    )


def parse_gift_update_line(line: str) -> GiftCounters | None:
    """
    Parse one trimmed, non-empty line into gift counters.

    Fields beyond the fourth are ignored, unless they show that the
    delimiter also split grouped numbers (``10597690,15,000,8,000``); such a
    layout is skipped. Returns ``None`` when no delimiter layout yields a
    valid ID and three valid counters.
    """

    for fields in candidate_fields(line, ImportMode.UPDATE):
        if _splits_digit_groups(fields):
            continue
        parsed = _counters_from_fields(fields)
        if parsed is not None:
            return parsed
    return None


def _splits_digit_groups(fields: list[str]) -> bool:
    if len(fields) <= GIFT_UPDATE_FIELD_COUNT:
        return False
    return any(_DIGIT_GROUP.fullmatch(field) for field in fields[2:])


def leading_field(line: str) -> str:
    """
    Best-effort identifier echo for an unparseable line.
    """

    fields = next(candidate_fields(line, ImportMode.UPDATE), None)
    candidate = fields[0].strip() if fields else line.strip()
    return candidate if is_valid_streamer_id(candidate) else ""
