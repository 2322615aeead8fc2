"""
batch_import/tokenizer.py

Delimiter heuristics that split one pasted line into fields.

Strategies are plain functions returning a field list, or ``None`` when the
heuristic does not apply. They are tried in priority order:

    1. comma-separated
    2. tab-separated
    3. whitespace runs          (gift-update mode only)
    4. trailing numeric suffix  (registration mode only)

A delimiter being present does not guarantee a well-formed line, so parsers
walk :func:`candidate_fields` and keep the first candidate they can accept.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator

from batch_import.types import ImportMode

MIN_ID_DIGITS = 5

# ASCII digits only; str.isdigit()/\d would also accept other scripts.
_ID_PATTERN = re.compile(r"[0-9]{%d,}" % MIN_ID_DIGITS)
_TRAILING_ID_PATTERN = re.compile(r"[0-9]{%d,}\Z" % MIN_ID_DIGITS)

DECORATIVE_SYMBOLS = "🦋💜💙💚💛🧡❤️💕✨⭐🌟"
_TRAILING_SEPARATORS = re.compile(r"[\s.,;:\-_" + DECORATIVE_SYMBOLS + r"]+\Z")

FieldStrategy = Callable[[str], "list[str] | None"]


def is_valid_streamer_id(value: str) -> bool:
    """
    Return True when *value* is a run of at least five ASCII digits.

    Shorter numbers are treated as counters or page numbers, not IDs.
    """

    return bool(_ID_PATTERN.fullmatch(value))


def split_on_comma(line: str) -> list[str] | None:
    if "," not in line:
        return None
    fields = [part.strip() for part in line.split(",")]
    return fields if len(fields) >= 2 else None


def split_on_tab(line: str) -> list[str] | None:
    if "\t" not in line:
        return None
    fields = [part.strip() for part in line.split("\t")]
    return fields if len(fields) >= 2 else None


def split_on_whitespace(line: str) -> list[str] | None:
    fields = line.split()
    return fields if len(fields) >= 2 else None


def extract_numeric_suffix(line: str) -> list[str] | None:
    """
    Split ``<name><separator><digits>`` glued together.

    The longest trailing run of at least five digits is the identifier;
    everything before it, minus trailing spaces, punctuation and decorative
    symbols, is the name. ``"Luh🦋10702736"`` gives ``["Luh", "10702736"]``.
    """

    match = _TRAILING_ID_PATTERN.search(line)
    if match is None:
        return None
    streamer_id = match.group(0)
    name = _TRAILING_SEPARATORS.sub("", line[: match.start()].strip()).strip()
    return [name, streamer_id]


STRATEGIES: dict[ImportMode, tuple[FieldStrategy, ...]] = {
    ImportMode.REGISTER: (split_on_comma, split_on_tab, extract_numeric_suffix),
    ImportMode.UPDATE: (split_on_comma, split_on_tab, split_on_whitespace),
}


def candidate_fields(line: str, mode: ImportMode) -> Iterator[list[str]]:
    """
    Yield every field list the strategies for *mode* produce, in priority order.
    """

    for strategy in STRATEGIES[mode]:
        fields = strategy(line)
        if fields is not None:
            yield fields


def tokenize(line: str, mode: ImportMode) -> list[str] | None:
    """
    Return the fields of the first strategy that recognises *line*.

    ``None`` means no delimiter heuristic applied.
    """

    return next(candidate_fields(line, mode), None)
