from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.middleware import install_query_counter

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Register the per-request SQL query counter on the production engine.
install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    FastAPI dependency returning the session factory.

    Repositories open a short-lived session per operation rather than
    sharing one request-wide session, so each write owns its transaction.
    """
    return async_session


async def create_schema(bind: AsyncEngine) -> None:
    """Create any missing tables on *bind*."""
    # Imported for its side effect of registering the tables on Base.metadata.
    import app.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
