"""
Database Configuration

Async SQLAlchemy engine, session factory and FastAPI dependency.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from seminar_hub.core.config import settings
from seminar_hub.core.errors import TransientError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_size=settings.database_pool_size,
    pool_pre_ping=True,
)

async_session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Faults that mean "the store is unreachable or too slow", not "bad input"
_TRANSIENT_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    asyncio.TimeoutError,
    ConnectionError,
)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate backing-store faults into TransientError.

    Usage:
        with store_errors("list users"):
            result = await db.execute(query)
    """
    try:
        yield
    except _TRANSIENT_ERRORS as e:
        logger.warning(f"Transient store failure during {operation}: {e}")
        raise TransientError(f"The data store is temporarily unavailable ({operation}).") from e


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a database session.

    Rolls back on any exception raised by the request handler.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Verify connectivity on startup. Schema is managed by Alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(lambda _: None)
    logger.info("Database connection established")


async def close_db() -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()


__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "store_errors",
    "get_db",
    "init_db",
    "close_db",
]
