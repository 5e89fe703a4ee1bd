"""
Database Session Management Module.

Provides async database session management using SQLAlchemy 2.0+ async patterns.
Each request gets its own session; statements are committed when the request
handler returns and rolled back if it raises.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import MetaData, Table
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.database.base import EXTERNALLY_PROVISIONED
from core.database.engine import get_engine, close_engine

logger = logging.getLogger(__name__)


# Global session factory (initialized lazily)
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get or create the async session factory.

    Returns:
        async_sessionmaker[AsyncSession]: Session factory for creating database sessions.
    """
    global _async_session_factory

    if _async_session_factory is None:
        engine = get_engine()
        _async_session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database session injection.

    Yields:
        AsyncSession: Database session that auto-closes after request.

    Example:
        @router.get("/items")
        async def get_items(db: Annotated[AsyncSession, Depends(get_db_session)]):
            ...
    """
    session_factory = get_session_factory()

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def service_owned_tables(metadata: MetaData) -> list[Table]:
    """Tables in `metadata` that are not flagged as externally provisioned."""
    return [
        table for table in metadata.sorted_tables
        if not table.info.get(EXTERNALLY_PROVISIONED, False)
    ]


async def init_database() -> None:
    """
    Initialize database schema.

    Creates the service-owned tables of registered models if they don't
    exist. Tables flagged EXTERNALLY_PROVISIONED are left alone: their
    absence is meaningful to the code that reads them.
    Should be called during application startup.
    """
    from core.database.base import Base

    tables = service_owned_tables(Base.metadata)
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=tables)
    logger.info(f"Database schema ready ({len(tables)} service-owned table(s))")


async def close_db_connections() -> None:
    """
    Close all database connections.

    Should be called during application shutdown.
    """
    global _async_session_factory

    await close_engine()
    _async_session_factory = None


# Type alias for dependency injection
DBSession = Annotated[AsyncSession, Depends(get_db_session)]
