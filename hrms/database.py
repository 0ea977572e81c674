"""Async SQLAlchemy engine and session management."""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hrms.config import settings


def _build_engine(url: str) -> Optional[AsyncEngine]:
    if not url:
        return None
    options: dict = {"echo": settings.ENVIRONMENT == "development"}
    if url.startswith("postgresql"):
        options.update(pool_size=10, max_overflow=20, pool_pre_ping=True)
    return create_async_engine(url, **options)


# Async engine for FastAPI; None when no database is configured
engine = _build_engine(settings.DATABASE_URL)

# Async session factory
async_session_factory = (
    async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    if engine is not None
    else None
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def get_db() -> AsyncGenerator[Optional[AsyncSession], None]:
    """FastAPI dependency: yield an async database session.

    Yields ``None`` when no database is configured; the tabular store turns
    that into a "Database Disconnected" failure on first use.
    """
    if async_session_factory is None:
        yield None
        return
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
