"""Database configuration and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from wortschatz.config import settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# NullPool creates fresh connections and closes them immediately after use,
# which keeps the CLI and the web app from fighting over a pooled SQLite handle
engine = create_async_engine(
    settings.resolved_database_url,
    echo=False,
    poolclass=NullPool,
)

# Session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for dependency injection."""
    async with async_session() as session:
        yield session
