"""
Database Infrastructure
=======================

Async SQLAlchemy engine and session factory for the complaint store
(`STORAGE_BACKEND=database`).

One engine per process, created at startup and disposed at shutdown.
Each request and each scheduled sweep gets its own session; the session
commits when the unit of work finishes and rolls back on error.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hostel_triage.config import Settings, get_settings
from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the complaints and events tables."""


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _normalise_url(url: str) -> str:
    # asyncpg takes ssl=, not libpq's sslmode=
    return url.replace("sslmode=", "ssl=")


def init_database(database_url: Optional[str] = None, settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Create the process-wide engine and session factory.

    Args:
        database_url: Overrides settings.database_url
        settings: Pool and echo configuration (defaults to get_settings())
    """
    global _engine, _session_factory

    settings = settings or get_settings()
    url = _normalise_url(database_url or settings.database_url)

    options = {"echo": settings.debug, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)

    _engine = create_async_engine(url, **options)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)

    logger.info("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database engine not initialized; call init_database() first")
    return _engine


async def close_database() -> None:
    global _engine, _session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database engine disposed")


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work against the complaint store.

    Used by request dependencies and by the scheduled SLA sweep alike.
    """
    if _session_factory is None:
        raise RuntimeError("Database engine not initialized; call init_database() first")

    async with _session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def create_tables() -> None:
    """Create the complaints and events tables if they are missing (no migrations)."""
    # Registers the models on Base.metadata
    from hostel_triage.complaints.infrastructure import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
