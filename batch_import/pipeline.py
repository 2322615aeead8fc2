"""
batch_import/pipeline.py

Entry points chaining tokenizer, parser, reconciler and consolidator.

Both functions are pure: identical text and existing records always produce
identical output, and the existing records are never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable

from batch_import.consolidator import VALID_DAY_MINUTES, consolidate_gift_updates
from batch_import.gift_update import parse_gift_update_line
from batch_import.headers import split_data_lines
from batch_import.reconciler import reconcile_gift_updates, reconcile_registrations
from batch_import.registration import parse_registration_line
from batch_import.types import (
    ImportMode,
    ParsedGiftUpdate,
    ParsedRegistration,
    StreamerRef,
    UpdateSubMode,
)


def parse_batch_input(
    text: str,
    existing: Iterable[StreamerRef],
    *,
    locale: str | None = None,
) -> list[ParsedRegistration]:
    """
    Parse a pasted registration list into one annotated entry per data line.
    """

    lines = split_data_lines(text, ImportMode.REGISTER)
    candidates = [(line, parse_registration_line(line)) for line in lines]
    return reconcile_registrations(candidates, existing, locale=locale)


def parse_gift_update_input(
    text: str,
    existing: Iterable[StreamerRef],
    *,
    sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE,
    valid_day_minutes: int = VALID_DAY_MINUTES,
    locale: str | None = None,
) -> list[ParsedGiftUpdate]:
    """
    Parse a pasted gift/time sheet against the existing streamers.

    In ``duplicate`` sub-mode the reconciled rows are consolidated, so the
    result is shorter than the number of data lines whenever IDs repeat.
    """

    lines = split_data_lines(text, ImportMode.UPDATE)
    candidates = [(line, parse_gift_update_line(line)) for line in lines]
    entries = reconcile_gift_updates(candidates, existing, sub_mode=sub_mode, locale=locale)
    if sub_mode is UpdateSubMode.DUPLICATE:
        return consolidate_gift_updates(entries, valid_day_minutes=valid_day_minutes)
    return entries
