"""
Database configuration - SQLAlchemy 2.0 Async
Project: Invoicer (Estimates & Invoices backend)

Defines the engine, the session factory, the FastAPI session dependency
and the `atomic` unit of work used by every multi-row write.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from invoicer.core.config import settings
from invoicer.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Async engine
# ------------------------------------------------------------
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)


# ------------------------------------------------------------
# Session factory
# ------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Yields:
        AsyncSession: async database session

    Example:
        @router.get("/estimates")
        async def list_estimates(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def atomic(db: AsyncSession, label: str = "unit of work") -> AsyncIterator[AsyncSession]:
    """
    Runs the enclosed block as a single transaction.

    Commits when the block completes. Any exception rolls the whole
    transaction back; database errors are logged and re-raised as
    PersistenceError so callers only ever see a generic failure.

    Args:
        db: Database session
        label: Operation name used in log lines

    Raises:
        PersistenceError: A database error occurred (after rollback)

    Example:
        async with atomic(db, "create estimate"):
            db.add(estimate)
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Database error during %s, rolled back: %s", label, e)
        raise PersistenceError() from e
    except Exception:
        await db.rollback()
        raise


async def init_db() -> None:
    """
    Checks that the database is reachable at startup.
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established")
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        raise


async def close_db() -> None:
    """
    Disposes the connection pool. Called on application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
