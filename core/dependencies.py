"""
FastAPI Dependencies - Dependency Injection for API Routers.

Provides `Annotated[Service, Depends(get_service)]` patterns for
clean dependency injection in FastAPI route handlers.

Usage:
    from core.dependencies import DbSessionDep

    @router.get("/items")
    async def get_items(db: DbSessionDep):
        ...
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database.session import get_db_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session.

    Re-exported from core.database.session so routers depend on one name
    that tests can override.

    Yields:
        AsyncSession: Database session that auto-closes after request
    """
    async for session in get_db_session():
        yield session


# Type alias for dependency injection
DbSessionDep = Annotated[AsyncSession, Depends(get_db)]
