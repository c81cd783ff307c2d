"""
Database engine and sessions
Async SQLAlchemy: PostgreSQL through asyncpg, SQLite through aiosqlite
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from .config import settings
from regalia.models import Base

logger = logging.getLogger(__name__)

def build_engine(url: str) -> AsyncEngine:
    """Engine for url; SQLite files get no pool, servers get the configured one"""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.DATABASE_ECHO, poolclass=NullPool)
    return create_async_engine(
        url,
        echo=settings.DATABASE_ECHO,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,
    )

engine = build_engine(settings.database_url_async)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session

    Listing requests only read; whatever transaction they opened is
    rolled back when the session closes.
    """
    async with AsyncSessionLocal() as session:
        yield session

@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Write session for maintenance jobs; commits on success"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def init_db() -> None:
    """Create missing tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database schema ready ({engine.url.render_as_string(hide_password=True)})")

async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
