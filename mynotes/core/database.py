"""
Database Configuration.

SQLAlchemy async engine and session management over SQLite (aiosqlite).
Uses lazy initialization so importing the package never touches the disk.
"""

from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mynotes.core.logging import get_logger
from mynotes.models.base import Base

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    from mynotes.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    connect_args: dict[str, Any] = {}
    if make_url(url).get_backend_name() == "sqlite":
        connect_args["timeout"] = db_config.timeout

    engine = create_async_engine(
        url,
        echo=db_config.echo,
        connect_args=connect_args,
    )
    logger.debug("Database engine created", extra={"url": url})
    return engine


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the session factory, creating it on first use.

    Returns:
        SQLAlchemy async session factory
    """
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def init_db(engine: AsyncEngine | None = None) -> None:
    """
    Create the notes and colors tables if they do not exist.

    The schema is fixed; there are no migrations. For file-backed SQLite
    the parent directory is created first.
    """
    engine = engine or get_engine()

    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def dispose_engine() -> None:
    """Dispose the shared engine and forget the session factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database engine disposed")
    _engine = None
    _async_session_factory = None
