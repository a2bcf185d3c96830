"""
Async engine and session lifecycle for the scheduler store.

Services receive ``get_db_session`` (or any context-manager factory with
the same contract) as their session factory; tests inject one bound to
an in-memory engine.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ..models import Base
from .config import get_settings

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def get_database_url() -> str:
    """DATABASE_URL from settings, falling back to the bundled SQLite file."""
    return get_settings().database_url


def _prepare_sqlite_file(database_url: str) -> bool:
    """Create the parent directory of a file-backed SQLite database.

    Returns:
        True for a file-backed SQLite URL, False for anything else
        (including in-memory SQLite).
    """
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return False
    if not url.database or url.database == ":memory:":
        return False
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return True


async def init_database(database_url: Optional[str] = None, create_tables: bool = True) -> AsyncEngine:
    """Create the engine and session factory, then the schema.

    Args:
        database_url: Overrides the configured URL
        create_tables: Run ``Base.metadata.create_all`` on start-up

    Returns:
        The initialized engine
    """
    global _engine, _session_factory

    database_url = database_url or get_database_url()
    logger.info(f"Initializing review store: {database_url}")

    options = {"echo": get_settings().debug, "pool_pre_ping": True}
    # File-backed SQLite: one connection per session
    if _prepare_sqlite_file(database_url):
        options["poolclass"] = NullPool

    _engine = create_async_engine(database_url, **options)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    if create_tables:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Scheduler tables created/verified")

    return _engine


async def close_database() -> None:
    """Dispose the engine; the next session lazily re-initializes."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Review store connection closed")
    _engine = None
    _session_factory = None


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session scope; rolls back and re-raises on any error.

    Callers commit explicitly.
    """
    if _session_factory is None:
        await init_database()

    async with _session_factory() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session rolled back: {e}")
            raise


async def health_check() -> bool:
    """True when ``SELECT 1`` succeeds against the store."""
    try:
        async with get_db_session() as session:
            value = (await session.execute(text("SELECT 1"))).scalar()
    except Exception as e:
        logger.error(f"Review store health check failed: {e}", exc_info=True)
        return False

    if value != 1:
        logger.warning(f"Health check query returned unexpected value: {value}")
        return False
    return True
