"""
batch_import/registration.py

Registration-line parser: extracts (display name, streamer ID) pairs.
"""

from __future__ import annotations

from batch_import.tokenizer import candidate_fields, is_valid_streamer_id
from batch_import.types import ImportMode, StreamerRef

# Length of the raw line echoed back as the name of an unparseable entry.
INVALID_NAME_PREVIEW_CHARS = 30


def _pair_from_fields(fields: list[str]) -> StreamerRef | None:
    if len(fields) < 2:
        return None
    name = fields[0].strip()
    streamer_id = fields[1].strip()
    if not name or not is_valid_streamer_id(streamer_id):
        return None
    return StreamerRef(name=name, streamer_id=streamer_id)


def parse_registration_line(line: str) -> StreamerRef | None:
    """
    Parse one trimmed, non-empty line into a name/ID pair.

    Comma, tab and numeric-suffix layouts are tried in that order; the first
    layout yielding a non-empty name and a valid ID wins. Returns ``None``
    when no layout fits.
    """

    for fields in candidate_fields(line, ImportMode.REGISTER):
        parsed = _pair_from_fields(fields)
        if parsed is not None:
            return parsed
    return None
