"""
batch_import/messages.py

Human-readable reasons attached to invalid import entries.

The agency operates in Portuguese, so a ``pt`` catalogue ships next to the
default English one. Both catalogues must define the same keys.
"""

from __future__ import annotations

from collections.abc import Mapping

DEFAULT_LOCALE = "en"

_CATALOGUES: dict[str, dict[str, str]] = {
    "en": {
        "invalid_format": "invalid format",
        "id_exists": 'ID "{streamer_id}" already exists — skipped',
        "name_exists": 'Name "{name}" already exists — skipped',
        "id_not_found": 'ID "{streamer_id}" not found — skipped',
        "duplicate_in_batch": "duplicate in this batch",
    },
    "pt": {
        "invalid_format": "Formato inválido",
        "id_exists": 'ID "{streamer_id}" já existe — ignorado',
        "name_exists": 'Nome "{name}" já existe — ignorado',
        "id_not_found": 'ID "{streamer_id}" não encontrado — ignorado',
        "duplicate_in_batch": "Duplicado neste lote",
    },
}

SUPPORTED_LOCALES: frozenset[str] = frozenset(_CATALOGUES)


def get_catalogue(locale: str | None = None) -> Mapping[str, str]:
    """
    Return the message catalogue for *locale*, falling back to English.
    """

    key = (locale or DEFAULT_LOCALE).strip().lower()
    return _CATALOGUES.get(key, _CATALOGUES[DEFAULT_LOCALE])


def render(key: str, locale: str | None = None, **values: str) -> str:
    return get_catalogue(locale)[key].format(**values)
