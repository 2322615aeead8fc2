from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables before touching the database.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from app.config import get_batch_import_settings
    from batch_import.messages import SUPPORTED_LOCALES
    from db.config import load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    try:
        database_url = resolve_database_url()
    except RuntimeError as exc:
        errors.append(str(exc))
    else:
        if not database_url.startswith("postgresql"):
            errors.append("Only PostgreSQL database URLs are supported.")

    raw_locale = os.getenv("BATCH_IMPORT_MESSAGE_LOCALE", "").strip().lower()
    if raw_locale and raw_locale not in SUPPORTED_LOCALES:
        errors.append(
            f"BATCH_IMPORT_MESSAGE_LOCALE='{raw_locale}' is not valid. "
            f"Allowed values: {sorted(SUPPORTED_LOCALES)}."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    settings = get_batch_import_settings()
    logging.getLogger(__name__).info(
        "Batch import settings valid_day_minutes=%d max_input_lines=%d locale=%s",
        settings.valid_day_minutes,
        settings.max_input_lines,
        settings.message_locale,
    )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch, %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate env, DB connectivity and schema on boot."""
    _validate_env()
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Streamer Agency API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import (
        batch_import_router,
        dashboard_router,
        export_router,
        snapshots_router,
        streamers_router,
    )

    # Import routes first so /streamers/import/* is never read as a streamer id.
    application.include_router(batch_import_router)
    application.include_router(streamers_router)
    application.include_router(snapshots_router)
    application.include_router(dashboard_router)
    application.include_router(export_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
