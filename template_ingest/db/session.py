"""Async engine and session handling for the template metadata database.

One engine and session maker are shared per process; ``close_db`` disposes
them so the next call rebuilds from fresh settings.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from template_ingest.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": True,
    }
    # Pool sizing applies to server databases only.
    if not settings.is_sqlite:
        options.update(pool_size=10, max_overflow=20)
    return options


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Return the shared async engine, creating it on first use."""
    global _engine

    if _engine is None:
        settings = settings or get_settings()
        logger.info(f"Creating async database engine: {settings.database_url}")
        _engine = create_async_engine(settings.database_url, **_engine_options(settings))

    return _engine


def get_session_maker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Return the shared session maker bound to :func:`get_engine`."""
    global _async_session_maker

    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(settings),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _async_session_maker


async def init_db(settings: Settings | None = None) -> None:
    """Create the template metadata tables if they do not exist.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    # Registers TemplateRecord with SQLModel.metadata.
    from template_ingest.db import models  # noqa: F401

    engine = get_engine(settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)
        raise

    logger.info("Template metadata tables ready")


async def close_db() -> None:
    """Dispose the shared engine and forget the session maker."""
    global _engine, _async_session_maker

    if _engine is None:
        return

    engine, _engine, _async_session_maker = _engine, None, None
    await engine.dispose()
    logger.info("Database engine closed")
