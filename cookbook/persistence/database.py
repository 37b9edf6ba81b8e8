"""Database connection and session management.

Provides async database engine, session factory and the per-request unit
of work for PostgreSQL.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cookbook.config import Settings
from cookbook.domain.service import FeedOutbox


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
    )


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession], outbox: FeedOutbox
) -> AsyncIterator[AsyncSession]:
    """Session for one request, committed on success and rolled back on error.

    Feed changes recorded during the request are published only after the
    commit succeeds, and dropped on rollback.

    Args:
        session_factory: Session factory
        outbox: Feed changes recorded by the request

    Yields:
        Session shared by every repository in the request
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
            logfire.info("Session committed")
        except Exception as e:
            logfire.warn("Session rollback", error=str(e))
            await session.rollback()
            outbox.discard()
            raise

    await outbox.flush()
