"""
app/services/upload_decoder.py

Turns uploaded import files into the plain text the parser consumes.

Text formats are decoded as UTF-8 (BOM tolerated). CSV files are read with the
csv module so quoting is undone, and spreadsheets are read with pandas; both
render every row as one tab-separated line, which the tokenizer already
understands.
"""

from __future__ import annotations

import csv
import io
import logging
import re

import pandas as pd

from app.services.batch_import_service import BatchImportDecodeError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = frozenset({".txt", ".csv", ".tsv"})
CSV_EXTENSIONS = frozenset({".csv"})
SPREADSHEET_EXTENSIONS = frozenset({".xlsx", ".xls"})
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | SPREADSHEET_EXTENSIONS

# Integer cells come back from Excel as floats ("10597690.0").
_WHOLE_FLOAT = re.compile(r"^(\d+)\.0+$")


def file_extension(filename: str | None) -> str:
    name = (filename or "").strip().lower()
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def decode_upload(filename: str | None, payload: bytes, *, max_bytes: int) -> str:
    """
    Decode *payload* into newline-separated text.

    Raises BatchImportDecodeError for unsupported extensions, oversize
    payloads and unreadable content.
    """

    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise BatchImportDecodeError(
            f"Unsupported file type {extension or '(none)'!r}. "
            f"Allowed: {', '.join(sorted(SUPPORTED_EXTENSIONS))}."
        )
    if len(payload) > max_bytes:
        raise BatchImportDecodeError(f"File exceeds the {max_bytes} byte limit.")

    if extension in TEXT_EXTENSIONS:
        try:
            text = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise BatchImportDecodeError("Text files must be UTF-8 encoded.") from exc
        return csv_to_text(text) if extension in CSV_EXTENSIONS else text

    return _spreadsheet_to_text(payload, filename=filename or "")


def csv_to_text(text: str) -> str:
    """
    Re-emit CSV *text* as tab-separated lines with quoting removed.

    ``"Ana, Jr",12345`` becomes ``Ana, Jr<TAB>12345`` and quoted grouped
    counts such as ``"15,000"`` stay in one field.
    """

    try:
        rows = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as exc:
        raise BatchImportDecodeError(f"CSV could not be read: {exc}") from exc

    lines = [_row_to_line(tuple(row)) for row in rows]
    return "\n".join(line for line in lines if line)


def _spreadsheet_to_text(payload: bytes, *, filename: str) -> str:
    try:
        frame = pd.read_excel(io.BytesIO(payload), header=None, dtype=object)
    except Exception as exc:  # noqa: BLE001 - pandas/openpyxl raise many types
        logger.warning("Spreadsheet decode failed filename=%r error=%s", filename, exc)
        raise BatchImportDecodeError("Spreadsheet could not be read.") from exc

    lines = [_row_to_line(row) for row in frame.itertuples(index=False, name=None)]
    logger.info("Spreadsheet decoded filename=%r rows=%d", filename, len(lines))
    return "\n".join(line for line in lines if line)


def _row_to_line(row: tuple[object, ...]) -> str:
    cells = [_cell_to_text(value) for value in row]
    while cells and not cells[-1]:
        cells.pop()
    return "\t".join(cells)


def _cell_to_text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    text = str(value).strip()
    match = _WHOLE_FLOAT.match(text)
    return match.group(1) if match else text
