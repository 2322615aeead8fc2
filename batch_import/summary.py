"""
batch_import/summary.py

Import tallies: the pre-commit validity summary and the post-commit result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from batch_import.types import ImportSummary, ParsedGiftUpdate, ParsedRegistration


def get_import_summary(
    entries: Iterable[ParsedRegistration | ParsedGiftUpdate],
) -> ImportSummary:
    """
    Count valid and invalid entries in whichever list the caller passes.
    """

    valid = 0
    invalid = 0
    for entry in entries:
        if entry.is_valid:
            valid += 1
        else:
            invalid += 1
    return ImportSummary(valid=valid, invalid=invalid)


@dataclass(frozen=True)
class BatchImportResult:
    """
    How many valid entries the record store accepted or rejected.

    Submissions are independent, so ``success`` and ``failed`` may both be
    non-zero after one commit.
    """

    success: int
    failed: int
    errors: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.failed == 0
