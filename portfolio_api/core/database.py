"""
Portfolio API - Database
========================

Async engine and request-scoped sessions. SQLite is the default store;
any SQLAlchemy async URL (e.g. ``postgresql+asyncpg://``) also works.
"""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from portfolio_api.core.config import settings

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Declarative base shared by every portfolio table."""


def _engine_options() -> dict[str, Any]:
    if settings.is_sqlite:
        # One file, shared across the event loop's threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(),
)

# Routers commit explicitly; objects stay readable after commit
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Anything left uncommitted when the handler raises is rolled back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables."""
    from portfolio_api.core import models  # noqa: F401  (registers tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_tables_ready", tables=len(Base.metadata.tables))


async def close_db() -> None:
    await engine.dispose()
