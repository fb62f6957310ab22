"""
Blog API Backend — Database Connection Management
==================================================

What:  Async SQLAlchemy engine, session factory, and declarative base.
Why:   Centralizes all database connection logic in one place.
How:   `Database` wraps one async engine with its pool and session factory.
       It is constructed once during application startup (lifespan), stored
       on `app.state`, and handed to request handlers through FastAPI
       dependencies. Nothing here is created at import time.
Who:   main.py (lifecycle), routes/dependencies.py (sessions), tests.

Connection Pooling Strategy:
    pool_size / max_overflow: from settings (PostgreSQL only)
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour
    connect timeout / command timeout: asyncpg connect_args, process-wide
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _engine_options(settings: Settings) -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments for the configured driver.

    SQLite (used by the test suite) rejects pool sizing arguments and asyncpg
    connect_args, so those are only added for server databases.
    """
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if settings.database_url.startswith("sqlite"):
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
        pool_timeout=settings.db_connect_timeout,
    )
    if "+asyncpg" in settings.database_url:
        options["connect_args"] = {
            "timeout": settings.db_connect_timeout,
            "command_timeout": settings.db_command_timeout,
        }
    return options


class Database:
    """
    Owns the engine and session factory for one configured database.

    Lifecycle:
        db = Database(settings)      # startup
        await db.create_schema()     # startup, idempotent
        ... per request: async with db.session() ...
        await db.dispose()           # shutdown
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **_engine_options(settings)
        )
        # expire_on_commit=False: attributes stay readable after the gateway commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """
        What:  Creates the `blogs` table if it does not exist yet.
        When:  Called once during application startup.
        """
        # Import registers the model on Base.metadata
        from blog_api.models import post  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield one session; roll back on error and always close.

        Commits are issued by the gateway per operation so that every write
        is complete before the response is produced.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()
