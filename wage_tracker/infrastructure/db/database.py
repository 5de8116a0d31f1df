"""
Database Configuration
SQLAlchemy async setup backing the SQL record store
"""

import logging
import os

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from wage_tracker.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def _normalize_async_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(_normalize_async_url(url), echo=echo, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Avoid creating the async engine during Alembic runs
ALEMBIC_MODE = os.getenv("ALEMBIC_MODE") == "1" or os.getenv("ALEMBIC_CONTEXT") == "1"

if not ALEMBIC_MODE:
    engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    async_session_factory = create_session_factory(engine)
else:
    engine = None
    async_session_factory = None


async def init_db(db_engine: AsyncEngine = None) -> None:
    """Initialize database (create tables)"""
    db_engine = db_engine or engine
    async with db_engine.begin() as conn:
        # Import all models here to ensure they're registered
        from wage_tracker.infrastructure.db import models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_db(db_engine: AsyncEngine = None) -> None:
    """Close database connections"""
    db_engine = db_engine or engine
    if db_engine is not None:
        await db_engine.dispose()
