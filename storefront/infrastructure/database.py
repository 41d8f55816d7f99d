"""Database configuration and session management.

Provides async SQLAlchemy engine and session factory.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from storefront.infrastructure.config import settings

# Base class for models
Base = declarative_base()

engine: AsyncEngine
async_session_factory: async_sessionmaker[AsyncSession]


def configure_database(database_url: str, echo: bool = False) -> AsyncEngine:
    """(Re)build the engine and session factory for a database URL.

    Scripts and tests call this to point the application at another
    database; the module-level names are replaced in place.

    Args:
        database_url: SQLAlchemy async database URL.
        echo: Whether to log emitted SQL.

    Returns:
        The new engine.
    """
    global engine, async_session_factory

    engine = create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine


configure_database(settings.database_url, echo=settings.debug)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the current session factory."""
    return async_session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession for database operations.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all() -> None:
    """Create all tables known to the ORM metadata."""
    # Import models so they register on Base.metadata
    import storefront.catalog.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
