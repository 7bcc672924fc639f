import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable

# Limits are exercised by slowapi itself; tests issue many requests from one address.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models.account import Account
from app.models.enums import AccountRole, Visibility
from app.models.post import Post
from shared.auth.config import get_auth_settings
from shared.database.postgres import Base

TEST_DATABASE_URL = "sqlite+aiosqlite://"

AccountFactory = Callable[..., Awaitable[Account]]
PostFactory = Callable[..., Awaitable[Post]]


def _enable_savepoints(engine) -> None:
    """pysqlite defers BEGIN; emit it ourselves so SAVEPOINT behaves."""

    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_account(db_session: AsyncSession) -> AccountFactory:
    async def _make(
        username: str | None = None,
        *,
        role: AccountRole = AccountRole.USER,
        visibility: Visibility | None = None,
        is_active: bool = True,
    ) -> Account:
        if visibility is None:
            visibility = Visibility.PRIVATE if role == AccountRole.ADMIN else Visibility.PUBLIC
        account = Account(
            id=uuid.uuid4(),
            username=username or f"user_{uuid.uuid4().hex[:8]}",
            display_name=(username or "Test User").title(),
            role=role,
            visibility=visibility,
            is_active=is_active,
        )
        db_session.add(account)
        await db_session.flush()
        return account

    return _make


@pytest_asyncio.fixture
async def make_post(db_session: AsyncSession) -> PostFactory:
    async def _make(
        author: Account,
        content: str = "hello world",
        visibility: Visibility = Visibility.PUBLIC,
    ) -> Post:
        post = Post(author_id=author.id, content=content, visibility=visibility)
        db_session.add(post)
        await db_session.flush()
        return post

    return _make


def bearer_for(account_id: uuid.UUID) -> dict[str, str]:
    settings = get_auth_settings()
    token = jwt.encode(
        {"sub": str(account_id), "iss": settings.issuer, "aud": settings.audience},
        settings.secret,
        algorithm=settings.algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[Account], dict[str, str]]:
    return lambda account: bearer_for(account.id)


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
