"""
batch_import/headers.py

Header-line detection for pasted spreadsheet data.

Trigger keywords are kept as per-mode configuration data so that new
spreadsheet layouts or languages only need a table change here.
"""

from __future__ import annotations

from dataclasses import dataclass

from batch_import.types import ImportMode


@dataclass(frozen=True)
class HeaderRule:
    """
    Substring keywords and exact literals that mark a first line as a header.
    """

    keywords: frozenset[str]
    literals: frozenset[str] = frozenset()


HEADER_RULES: dict[ImportMode, HeaderRule] = {
    ImportMode.REGISTER: HeaderRule(
        keywords=frozenset({"nome", "name", "id"}),
        literals=frozenset({"nome,id", "name,id"}),
    ),
    ImportMode.UPDATE: HeaderRule(
        keywords=frozenset({"sorte", "exclusivo", "minuto", "tempo", "luck", "exclusive", "id"}),
    ),
}


def is_header_line(line: str, mode: ImportMode) -> bool:
    """
    Return True when *line* looks like a column header for *mode*.

    Matching is a case-insensitive substring test, so ``"ID"`` inside a
    longer header still triggers.
    """

    rule = HEADER_RULES[mode]
    lowered = line.strip().lower()
    if not lowered:
        return False
    if lowered in rule.literals:
        return True
    return any(keyword in lowered for keyword in rule.keywords)


def split_data_lines(text: str, mode: ImportMode) -> list[str]:
    """
    Split raw text into trimmed, non-blank data lines.

    Any line ending is accepted. The first non-blank line is dropped when it
    is recognised as a header for *mode*.
    """

    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if lines and is_header_line(lines[0], mode):
        return lines[1:]
    return lines
