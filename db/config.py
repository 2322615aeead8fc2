"""
db/config.py

Environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from pathlib import Path

_ENV_FILENAMES = (".env", ".env.local")


def load_env_files() -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` at the project root.

    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILENAMES:
        env_path = project_root / filename
        if not env_path.is_file():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            if key and key not in os.environ:
                os.environ[key] = value.strip().strip('"').strip("'")


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite postgres URLs to the psycopg 3 driver form SQLAlchemy expects.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    """
    Resolve the record store URL.

    Priority:
    1) DATABASE_URL
    2) CLOUD_DATABASE_URL (hosted Postgres behind the agency dashboard)
    3) LOCAL_DATABASE_URL
    """

    load_env_files()

    for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL"):
        value = os.getenv(name, "").strip()
        if value:
            return normalize_postgres_url(value)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
        "or LOCAL_DATABASE_URL."
    )
