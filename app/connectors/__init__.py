"""
app/connectors package marker.
"""

from app.connectors.spreadsheet_export import (
    SpreadsheetExportFetcher,
    SpreadsheetFetchError,
    SpreadsheetUrlError,
    build_export_url,
)

__all__ = [
    "SpreadsheetExportFetcher",
    "SpreadsheetFetchError",
    "SpreadsheetUrlError",
    "build_export_url",
]
