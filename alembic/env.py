"""
alembic/env.py

Migration environment for the streamers and snapshots tables.

The target database is the one the API uses (see ``db.config``), unless a
single run passes ``-x db_url=...``.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from db.base import Base
from db.config import normalize_postgres_url, resolve_database_url
from db.models import Snapshot, Streamer  # noqa: F401  registers tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def _migration_url() -> str:
    """
    Return the ``-x db_url`` override, or the API's DATABASE_URL /
    CLOUD_DATABASE_URL / LOCAL_DATABASE_URL resolution.
    """

    override = (context.get_x_argument(as_dictionary=True).get("db_url") or "").strip()
    url = normalize_postgres_url(override) if override else resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("Migrations target PostgreSQL only; got a non-postgres URL.")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine_options = config.get_section(config.config_ini_section, {})
    engine_options["sqlalchemy.url"] = _migration_url()
    connectable = engine_from_config(engine_options, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, **_COMPARE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
