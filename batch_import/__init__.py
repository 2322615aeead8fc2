"""
batch_import package exports.
"""

from batch_import.consolidator import VALID_DAY_MINUTES, consolidate_gift_updates, is_valid_day
from batch_import.pipeline import parse_batch_input, parse_gift_update_input
from batch_import.summary import BatchImportResult, get_import_summary
from batch_import.types import (
    ImportAction,
    ImportErrorKind,
    ImportMode,
    ImportSummary,
    ParsedGiftUpdate,
    ParsedRegistration,
    StreamerRef,
    UpdateSubMode,
)

__all__ = [
    "BatchImportResult",
    "ImportAction",
    "ImportErrorKind",
    "ImportMode",
    "ImportSummary",
    "ParsedGiftUpdate",
    "ParsedRegistration",
    "StreamerRef",
    "UpdateSubMode",
    "VALID_DAY_MINUTES",
    "consolidate_gift_updates",
    "get_import_summary",
    "is_valid_day",
    "parse_batch_input",
    "parse_gift_update_input",
]
