"""
Test infrastructure for the Blog Posts API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces Postgres, so the suite needs no
  running database.
- StaticPool makes every session share the single in-memory connection;
  a second connection would see an empty database.
- The app's get_session_factory dependency is overridden so every request
  builds its PostRepository on the test session factory.
- Tables are created before and dropped after each test.
- Redis is never connected; the CacheManager treats a missing client as a
  permanent miss, so every read exercises the repository.
"""
from contextlib import contextmanager

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.cache import cache
from app.database import Base, get_session_factory
from app.main import app
from app.middleware import install_query_counter
from app.repositories import PostRepository

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


def override_get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_test


app.dependency_overrides[get_session_factory] = override_get_session_factory


async def _count_rows(table) -> int:
    """Return the number of rows currently stored in *table*."""
    async with async_session_test() as session:
        return (await session.execute(select(func.count()).select_from(table))).scalar_one()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    cache._redis = None
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def repo() -> PostRepository:
    return PostRepository(async_session_test)


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def count_rows():
    """Async helper returning the number of rows stored in a table."""
    return _count_rows


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_test


@pytest.fixture
def db_engine():
    return engine_test


@contextmanager
def _failing_link_insert():
    """Make every INSERT into the link table fail at the driver boundary."""

    def _fail(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("INSERT INTO BLOG_POSTS_COMMENTS"):
            raise OperationalError(statement, parameters, Exception("link write failed"))

    event.listen(engine_test.sync_engine, "before_cursor_execute", _fail)
    try:
        yield
    finally:
        event.remove(engine_test.sync_engine, "before_cursor_execute", _fail)


@pytest.fixture
def failing_link_insert():
    """Context manager factory simulating a failed link-row write."""
    return _failing_link_insert
