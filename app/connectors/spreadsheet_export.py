"""
app/connectors/spreadsheet_export.py

Fetches the CSV export of a shared online spreadsheet for batch import.

Only hosts on the configured allowlist are contacted (Google Sheets by
default), and export bodies are read in chunks up to a byte limit.
"""

from __future__ import annotations

import logging
import re
import time
from urllib.parse import parse_qs, urlparse

import requests

from app.config import SpreadsheetFetchSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
GOOGLE_SHEETS_HOST = "docs.google.com"
DEFAULT_ALLOWED_HOSTS = (GOOGLE_SHEETS_HOST,)

_CHUNK_BYTES = 64 * 1024
_SHEET_KEY_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_GID_PATTERN = re.compile(r"gid=(\d+)")


class SpreadsheetFetchError(RuntimeError):
    """
    Raised when a shared spreadsheet cannot be fetched after retries.
    """


class SpreadsheetUrlError(SpreadsheetFetchError):
    """
    Raised when a link is malformed or points outside the allowed hosts.
    """


def build_export_url(url: str, *, allowed_hosts: tuple[str, ...] = DEFAULT_ALLOWED_HOSTS) -> str:
    """
    Return the CSV export URL for a shared spreadsheet link.

    Google Sheets share/edit links are rewritten to their ``export?format=csv``
    form, keeping the selected tab (``gid``). Links to other allowlisted
    hosts are assumed to already point at a CSV document. Anything else,
    including non-https URLs, explicit ports and credentials, raises
    SpreadsheetUrlError.
    """

    candidate = url.strip()
    parsed = urlparse(candidate)
    if parsed.scheme != "https" or not parsed.hostname:
        raise SpreadsheetUrlError(f"Not a valid spreadsheet URL: {url!r}")

    try:
        port = parsed.port
    except ValueError as exc:
        raise SpreadsheetUrlError(f"Not a valid spreadsheet URL: {url!r}") from exc

    host = parsed.hostname.lower()
    if host not in allowed_hosts or parsed.username is not None or port not in (None, 443):
        raise SpreadsheetUrlError(f"Spreadsheet host {host!r} is not allowed.")

    if host != GOOGLE_SHEETS_HOST:
        return candidate

    key_match = _SHEET_KEY_PATTERN.search(parsed.path)
    if key_match is None:
        raise SpreadsheetUrlError(f"Not a Google Sheets spreadsheet link: {url!r}")

    gid = parse_qs(parsed.query).get("gid", [None])[0]
    if gid is None:
        fragment_match = _GID_PATTERN.search(parsed.fragment)
        gid = fragment_match.group(1) if fragment_match else None

    export_url = f"https://{GOOGLE_SHEETS_HOST}/spreadsheets/d/{key_match.group(1)}/export?format=csv"
    return f"{export_url}&gid={gid}" if gid else export_url


class SpreadsheetExportFetcher:
    """
    Downloads spreadsheet exports with retry and exponential backoff.
    """

    def __init__(
        self,
        *,
        http_settings: SpreadsheetFetchSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._max_bytes = http_settings.max_bytes
        self._allowed_hosts = http_settings.allowed_hosts

    def fetch_text(self, url: str) -> str:
        """
        Fetch the CSV export behind *url* and return it as text.
        """

        export_url = build_export_url(url, allowed_hosts=self._allowed_hosts)
        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.get(export_url, timeout=self._timeout_seconds, stream=True)
                try:
                    if response.status_code in RETRYABLE_STATUS_CODES:
                        raise requests.HTTPError(
                            f"Retryable HTTP status code: {response.status_code}",
                            response=response,
                        )
                    response.raise_for_status()
                    body = self._read_body(response, export_url)
                finally:
                    response.close()
                return body.decode("utf-8-sig", errors="replace")
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Spreadsheet fetch failed status=%s url=%s error=%s",
                        status_code,
                        export_url,
                        exc,
                    )
                    raise SpreadsheetFetchError(
                        "Spreadsheet is not reachable; check that it is shared publicly."
                    ) from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Spreadsheet fetch retry attempt=%s/%s wait_seconds=%.2f url=%s",
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                export_url,
            )
            time.sleep(backoff_seconds)

        logger.error("Spreadsheet fetch exhausted retries url=%s error=%s", export_url, last_error)
        raise SpreadsheetFetchError("Spreadsheet fetch failed after retries.") from last_error

    def _read_body(self, response: requests.Response, export_url: str) -> bytes:
        declared = response.headers.get("Content-Length", "")
        if declared.isdigit() and int(declared) > self._max_bytes:
            raise self._oversize(export_url)

        body = bytearray()
        for chunk in response.iter_content(chunk_size=_CHUNK_BYTES):
            body.extend(chunk)
            if len(body) > self._max_bytes:
                raise self._oversize(export_url)
        return bytes(body)

    def _oversize(self, export_url: str) -> SpreadsheetFetchError:
        logger.warning("Spreadsheet export too large max_bytes=%d url=%s", self._max_bytes, export_url)
        return SpreadsheetFetchError(f"Spreadsheet export exceeds the {self._max_bytes} byte limit.")
