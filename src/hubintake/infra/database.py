"""Database engine and session management."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from hubintake.app.config import DatabaseConfig
from hubintake.core.logging_schema import LogEvent

# Register tables on SQLModel.metadata
from hubintake.infra import models  # noqa: F401

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create async engine for PostgreSQL, or SQLite in tests.

    SQLite uses a StaticPool so every session shares the same (possibly
    in-memory) database.
    """
    if config.url.startswith("sqlite"):
        return create_async_engine(
            config.url,
            echo=config.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_recycle=3600,
        pool_pre_ping=True,
    )


async def init_db(config: DatabaseConfig) -> AsyncEngine:
    """Initialize database connection and optionally create tables."""
    global _engine, _session_factory

    _engine = create_engine(config)
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    try:
        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if config.create_tables:
                await conn.run_sync(SQLModel.metadata.create_all)
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={
                "event": LogEvent.DB_ERROR,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        )
        raise

    logger.info(
        "Database connected",
        extra={
            "event": LogEvent.DB_CONNECTED,
            "database": config.url.split("@")[-1],  # Hide credentials
        },
    )
    return _engine


async def close_db() -> None:
    """Close database connection."""
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")


def get_engine() -> AsyncEngine:
    """Get the current database engine."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session (FastAPI dependency)."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _session_factory() as session:
        yield session
