import logging
from collections.abc import AsyncGenerator

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.database.postgres import get_async_session_factory

# Import all models so SQLAlchemy's Base.metadata is populated.
# Required for Alembic autogenerate and create_all().
import app.models  # noqa: F401
from app.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str) -> None:
    global _session_factory
    _session_factory = get_async_session_factory(database_url, expire_on_commit=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session and one transaction per request.

    Commits when the handler returns, rolls back on any exception. Connection
    level failures surface as StorageUnavailable so callers can retry.
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except (OperationalError, InterfaceError) as exc:
            await session.rollback()
            logger.warning("Storage unavailable: %s", exc)
            raise StorageUnavailable() from exc
        except Exception:
            await session.rollback()
            raise
