"""
Async engine, session factory and the per-request session dependency.

Handlers never touch the engine directly. They receive a session through
``get_db``, which itself receives the session factory through
``get_session_factory`` so the pool handle can be swapped (tests inject
their own factory).
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from resort_api.core.config import get_settings
from resort_api.core.exceptions import DatabaseUnavailableError
from resort_api.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Errors that mean "no connection could be acquired", as opposed to a failing query
CONNECTION_ERRORS = (PoolTimeoutError, OperationalError, InterfaceError, OSError)


def get_session_factory() -> async_sessionmaker:
    return AsyncSessionLocal


async def get_db(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session holding one pooled connection for the whole request.

    The connection is checked out up front so an exhausted pool or a dead
    database surfaces as 503 before the handler runs. Leaving the
    ``async with`` block returns the connection on every path.
    """
    async with session_factory() as session:
        try:
            await session.connection()
        except CONNECTION_ERRORS as e:
            logger.error("db_connection_failed", error_type=type(e).__name__)
            raise DatabaseUnavailableError("Database connection failed") from e

        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    await engine.dispose()
