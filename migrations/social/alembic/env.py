import asyncio
import os
import sys
from pathlib import Path

from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# ── Path setup ────────────────────────────────────────────────────────────────
# env.py lives at: <repo>/migrations/social/alembic/env.py
#   parents[3] = <repo>   ← repo root
repo_root = Path(__file__).resolve().parents[3]
sys.path.insert(0, str(repo_root / "shared"))               # makes `shared` importable
sys.path.insert(0, str(repo_root / "services" / "social"))  # makes `app` importable

# Registers every table on Base.metadata for autogenerate
import app.models  # noqa: E402,F401
from shared.database.postgres import Base  # noqa: E402

# ── Alembic config ────────────────────────────────────────────────────────────
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

url = os.environ.get("SOCIAL_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
# Escape '%' as '%%' for configparser interpolation (URL-encoded passwords)
config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))

target_metadata = Base.metadata


# ── Offline mode ──────────────────────────────────────────────────────────────

def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


# ── Online mode (async) ───────────────────────────────────────────────────────

def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
