"""
app/services/export_service.py

Streamer data export in the formats the agency shares with its hosts.

Supported renderings, all driven by the same field catalogue and toggles:

    compact  : one line per streamer, ready to paste into WhatsApp
    text     : one labelled block per streamer, closed by a dashed rule
    csv      : header row + one row per streamer
    xlsx     : same table as csv, auto-sized columns (pandas + openpyxl)

Rows come either from the live streamer records or from a stored snapshot.
Ranking numbers follow the order of the rows after sorting.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from typing import Any

import pandas as pd
from openpyxl.utils import get_column_letter

from kpi.dashboard import StreamerRecord
from kpi.formatting import (
    calculate_agency_usd,
    calculate_host_usd,
    format_currency,
    format_minutes_to_hours,
    format_number,
)

TEXT_BLOCK_SEPARATOR = "-" * 24
SHEET_NAME = "Streamers"
MAX_COLUMN_WIDTH = 30


@dataclass(frozen=True)
class ExportRow:
    streamer_id: str
    name: str
    luck_gifts: int = 0
    exclusive_gifts: int = 0
    host_crystals: int = 0
    minutes: int = 0
    effective_days: int = 0


@dataclass(frozen=True)
class ExportOptions:
    include_ranking: bool = True
    include_name: bool = True
    include_id: bool = True
    include_luck_gifts: bool = True
    include_exclusive_gifts: bool = True
    include_host_crystals: bool = True
    include_host_usd: bool = True
    include_agency_usd: bool = True
    include_hours: bool = True
    include_days: bool = True


@dataclass(frozen=True)
class ExportField:
    option: str
    label: str
    get_value: Callable[[ExportRow, int], str]


@dataclass(frozen=True)
class SpreadsheetPreview:
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


EXPORT_FIELDS: tuple[ExportField, ...] = (
    ExportField("include_ranking", "Ranking", lambda row, index: str(index + 1)),
    ExportField("include_name", "Nome", lambda row, index: row.name),
    ExportField("include_id", "ID", lambda row, index: row.streamer_id),
    ExportField("include_exclusive_gifts", "Exclusivos", lambda row, index: format_number(row.exclusive_gifts)),
    ExportField(
        "include_host_usd",
        "Host $",
        lambda row, index: format_currency(calculate_host_usd(row.host_crystals)),
    ),
    ExportField(
        "include_agency_usd",
        "Agência $",
        lambda row, index: format_currency(calculate_agency_usd(row.host_crystals)),
    ),
    ExportField("include_host_crystals", "Cristais", lambda row, index: format_number(row.host_crystals)),
    ExportField("include_luck_gifts", "Sorte", lambda row, index: format_number(row.luck_gifts)),
    ExportField("include_hours", "Horas", lambda row, index: format_minutes_to_hours(row.minutes)),
    ExportField("include_days", "Dias", lambda row, index: str(row.effective_days)),
)

# One-line layout keeps the column order hosts are used to reading.
_COMPACT_ORDER: tuple[str, ...] = (
    "include_ranking",
    "include_name",
    "include_id",
    "include_luck_gifts",
    "include_exclusive_gifts",
    "include_host_crystals",
    "include_host_usd",
    "include_agency_usd",
    "include_hours",
    "include_days",
)

SORT_KEYS: dict[str, Callable[[ExportRow], Any]] = {
    "name": lambda row: row.name.lower(),
    "streamer_id": lambda row: row.streamer_id,
    "luck_gifts": lambda row: row.luck_gifts,
    "exclusive_gifts": lambda row: row.exclusive_gifts,
    "host_crystals": lambda row: row.host_crystals,
    "host_usd": lambda row: row.host_crystals,
    "agency_usd": lambda row: row.host_crystals,
    "minutes": lambda row: row.minutes,
    "effective_days": lambda row: row.effective_days,
}


def export_filename(today: date) -> str:
    """Base filename for downloads, e.g. ``streamers_2025-03-01``."""
    return f"streamers_{today.isoformat()}"


class ExportService:
    """
    Renders streamer rows in the configured export formats.
    """

    # ------------------------------------------------------------------
    # Row sources
    # ------------------------------------------------------------------

    @staticmethod
    def rows_from_streamers(streamers: Iterable[StreamerRecord]) -> list[ExportRow]:
        return [
            ExportRow(
                streamer_id=s.streamer_id,
                name=s.name,
                luck_gifts=s.luck_gifts,
                exclusive_gifts=s.exclusive_gifts,
                host_crystals=s.host_crystals,
                minutes=s.minutes,
                effective_days=s.effective_days,
            )
            for s in streamers
        ]

    @staticmethod
    def rows_from_snapshot_data(data: Iterable[Mapping[str, Any]]) -> list[ExportRow]:
        return [
            ExportRow(
                streamer_id=str(item.get("streamer_id", "")),
                name=str(item.get("name", "")),
                luck_gifts=int(item.get("luck_gifts", 0)),
                exclusive_gifts=int(item.get("exclusive_gifts", 0)),
                host_crystals=int(item.get("host_crystals", 0)),
                minutes=int(item.get("minutes", 0)),
                effective_days=int(item.get("effective_days", 0)),
            )
            for item in data
        ]

    @staticmethod
    def sort_rows(rows: Sequence[ExportRow], *, sort_field: str, descending: bool = True) -> list[ExportRow]:
        key = SORT_KEYS.get(sort_field)
        if key is None:
            raise ValueError(f"Unsupported sort field {sort_field!r}. Allowed: {sorted(SORT_KEYS)}.")
        return sorted(rows, key=key, reverse=descending)

    # ------------------------------------------------------------------
    # Renderings
    # ------------------------------------------------------------------

    @staticmethod
    def get_active_fields(options: ExportOptions) -> list[ExportField]:
        return [export_field for export_field in EXPORT_FIELDS if getattr(options, export_field.option)]

    def format_text_block(self, rows: Sequence[ExportRow], options: ExportOptions) -> str:
        """
        One block per streamer: a ``Streamer: <name>`` title, one
        ``Label: value`` line per active field, then a dashed rule.
        """

        active = [f for f in self.get_active_fields(options) if f.option != "include_name"]
        lines: list[str] = []
        for index, row in enumerate(rows):
            lines.append(f"Streamer: {row.name}")
            lines.extend(f"{f.label}: {f.get_value(row, index)}" for f in active)
            lines.append(TEXT_BLOCK_SEPARATOR)
        return "\n".join(lines)

    def format_compact_lines(self, rows: Sequence[ExportRow], options: ExportOptions) -> str:
        by_option = {export_field.option: export_field for export_field in EXPORT_FIELDS}
        active = [by_option[option] for option in _COMPACT_ORDER if getattr(options, option)]
        lines: list[str] = []
        for index, row in enumerate(rows):
            parts = [
                f"🏆 {index + 1}" if f.option == "include_ranking" else f.get_value(row, index)
                for f in active
            ]
            lines.append(" ".join(parts))
        return "\n".join(lines)

    def format_spreadsheet_preview(
        self,
        rows: Sequence[ExportRow],
        options: ExportOptions,
    ) -> SpreadsheetPreview:
        active = self.get_active_fields(options)
        return SpreadsheetPreview(
            headers=[f.label for f in active],
            rows=[[f.get_value(row, index) for f in active] for index, row in enumerate(rows)],
        )

    def to_csv(self, rows: Sequence[ExportRow], options: ExportOptions) -> str:
        preview = self.format_spreadsheet_preview(rows, options)
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(preview.headers)
        writer.writerows(preview.rows)
        return buf.getvalue()

    def to_xlsx(self, rows: Sequence[ExportRow], options: ExportOptions) -> bytes:
        """
        Encode the spreadsheet preview as an XLSX workbook.

        Column width is the longest cell (header included) plus two,
        capped at 30 characters.
        """

        preview = self.format_spreadsheet_preview(rows, options)
        frame = pd.DataFrame(preview.rows, columns=preview.headers)

        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            sheet = writer.sheets[SHEET_NAME]
            for column_index, header in enumerate(preview.headers):
                longest = max([len(header)] + [len(row[column_index]) for row in preview.rows])
                width = min(longest + 2, MAX_COLUMN_WIDTH)
                sheet.column_dimensions[get_column_letter(column_index + 1)].width = width
        return buf.getvalue()


@lru_cache(maxsize=1)
def get_export_service() -> ExportService:
    return ExportService()
