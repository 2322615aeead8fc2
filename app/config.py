"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from batch_import.consolidator import VALID_DAY_MINUTES
from batch_import.messages import DEFAULT_LOCALE, SUPPORTED_LOCALES
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_hosts_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated host list, lower-cased, from environment variables.
    """

    raw_value = _get_str_env(name, "")
    hosts = tuple(host.strip().lower() for host in raw_value.split(",") if host.strip())
    return hosts or default


@dataclass(frozen=True)
class BatchImportSettings:
    """
    Runtime settings for pasted/uploaded batch imports.
    """

    valid_day_minutes: int = VALID_DAY_MINUTES
    max_input_lines: int = 5000
    max_upload_bytes: int = 5 * 1024 * 1024
    message_locale: str = DEFAULT_LOCALE
    log_rejections: bool = True


@dataclass(frozen=True)
class SpreadsheetFetchSettings:
    """
    HTTP behavior for fetching shared spreadsheet exports.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    max_bytes: int = 5 * 1024 * 1024
    allowed_hosts: tuple[str, ...] = ("docs.google.com",)


@lru_cache(maxsize=1)
def get_batch_import_settings() -> BatchImportSettings:
    """
    Return cached batch import settings from environment variables.
    """

    locale = _get_str_env("BATCH_IMPORT_MESSAGE_LOCALE", DEFAULT_LOCALE).lower()
    if locale not in SUPPORTED_LOCALES:
        locale = DEFAULT_LOCALE

    return BatchImportSettings(
        valid_day_minutes=max(0, _get_int_env("BATCH_IMPORT_VALID_DAY_MINUTES", VALID_DAY_MINUTES)),
        max_input_lines=max(1, _get_int_env("BATCH_IMPORT_MAX_INPUT_LINES", 5000)),
        max_upload_bytes=max(1024, _get_int_env("BATCH_IMPORT_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
        message_locale=locale,
        log_rejections=_get_bool_env("BATCH_IMPORT_LOG_REJECTIONS", True),
    )


@lru_cache(maxsize=1)
def get_spreadsheet_fetch_settings() -> SpreadsheetFetchSettings:
    """
    Return spreadsheet fetch HTTP settings from environment variables.
    """

    return SpreadsheetFetchSettings(
        timeout_seconds=max(1.0, _get_float_env("SPREADSHEET_FETCH_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("SPREADSHEET_FETCH_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("SPREADSHEET_FETCH_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("SPREADSHEET_FETCH_BACKOFF_MULTIPLIER", 2.0)),
        max_bytes=get_batch_import_settings().max_upload_bytes,
        allowed_hosts=_get_hosts_env("SPREADSHEET_FETCH_ALLOWED_HOSTS", ("docs.google.com",)),
    )
