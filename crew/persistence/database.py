"""Database connection and session management.

Provides async database engine and session factory for PostgreSQL, and the
per-request session that wraps every write of a request in one transaction.
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

from crew.config import Settings


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
        autocommit=False,  # Explicit transaction management
    )


class RequestTransaction:
    """Outcome flag for the transaction of one request.

    Exception handlers that turn an error into a normal response mark it
    rollback-only, so writes made before the error are not committed.
    """

    def __init__(self) -> None:
        self.rollback_only = False

    def mark_rollback_only(self) -> None:
        self.rollback_only = True


@asynccontextmanager
async def request_session(
    session_factory: async_sessionmaker[AsyncSession],
    transaction: RequestTransaction,
) -> AsyncIterator[AsyncSession]:
    """Open a session whose transaction spans one request.

    Commits at the end unless an exception escaped or the transaction was
    marked rollback-only; rolls back otherwise.
    """
    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            logfire.warn("Session rollback", error=str(e))
            await session.rollback()
            raise

        if transaction.rollback_only:
            logfire.info("Session rollback after handled error")
            await session.rollback()
        else:
            await session.commit()
            logfire.debug("Session committed")
