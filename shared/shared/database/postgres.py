import os
import ssl
from pathlib import Path
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

# Deterministic names for constraints declared without one, so Alembic
# migrations can drop/alter them by name.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def _build_ssl_connect_args() -> dict[str, Any]:
    """Return asyncpg ``connect_args`` for SSL when DATABASE_SSL is set."""
    mode = os.environ.get("DATABASE_SSL", "").lower()
    if not mode or mode == "disable":
        return {}

    cert_path = os.environ.get("RDS_SSL_CERT", "")
    if cert_path and Path(cert_path).exists():
        ctx = ssl.create_default_context(cafile=cert_path)
        return {"connect_args": {"ssl": ctx}}

    # Encrypted, no certificate verification
    return {"connect_args": {"ssl": "require"}}


def get_async_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Pooled engine for PostgreSQL; other backends get their dialect defaults."""
    if make_url(database_url).get_backend_name() != "postgresql":
        return create_async_engine(database_url, **kwargs)
    merged = {**_build_ssl_connect_args(), **kwargs}
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        **merged,
    )


def get_async_session_factory(
    database_url: str,
    *,
    expire_on_commit: bool = False,
    **engine_kwargs: Any,
) -> async_sessionmaker[AsyncSession]:
    engine = get_async_engine(database_url, **engine_kwargs)
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=expire_on_commit,
        autoflush=False,
    )
