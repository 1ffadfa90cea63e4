"""
Kindred — Database engine, sessions and lifecycle hooks

One async engine per process, built at import time from settings:

* Cloud Run: ``cloud-sql-python-connector`` with IAM auth, selected when
  ``CLOUD_SQL_USE_UNIX_SOCKET`` is set and an instance connection name is
  configured.
* Anywhere else: a plain asyncpg ``DATABASE_URL``.

Sessions come in two flavours.  ``get_db`` is the per-request unit of work
(committed when the endpoint returns, rolled back if it raises).
``get_isolated_db`` hands out a session outside that unit of work, for
writes that commit themselves and must not affect the request's outcome
(chat previews).

``check_connection`` and ``dispose_engine`` are called by the application
lifespan and the deep health check.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Timezone-aware "now" used for every stored timestamp."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for the profile, connection-request and chat tables."""


# ── Engine ────────────────────────────────────────────────────────────────


def _engine_options(settings: Settings) -> dict[str, Any]:
    return {
        "echo": settings.LOG_LEVEL == "DEBUG",
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
        "pool_recycle": settings.DB_POOL_RECYCLE_SECONDS,
        "pool_pre_ping": True,
    }


def _asyncpg_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


def _uses_cloud_sql(settings: Settings) -> bool:
    return bool(settings.CLOUD_SQL_USE_UNIX_SOCKET and settings.CLOUD_SQL_INSTANCE_CONNECTION)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; no connection is opened until first use."""
    options = _engine_options(settings)

    if not _uses_cloud_sql(settings):
        logger.info("Database engine using DATABASE_URL (pool_size=%d)", settings.DB_POOL_SIZE)
        return create_async_engine(_asyncpg_url(settings.DATABASE_URL), **options)

    from google.cloud.sql.connector import Connector

    connector = Connector()

    async def _connect():
        return await connector.connect_async(
            settings.CLOUD_SQL_INSTANCE_CONNECTION,
            "asyncpg",
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            db=settings.DB_NAME,
            enable_iam_auth=True,
        )

    logger.info(
        "Database engine using Cloud SQL Connector for %s (pool_size=%d)",
        settings.CLOUD_SQL_INSTANCE_CONNECTION,
        settings.DB_POOL_SIZE,
    )
    return create_async_engine("postgresql+asyncpg://", async_creator=_connect, **options)


engine = build_engine(get_settings())

async_session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Sessions ──────────────────────────────────────────────────────────────


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One unit of work: commit on clean exit, roll back on any exception.

    Used by ``get_db`` and by the maintenance scripts.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: the request's unit of work."""
    async with session_scope() as session:
        yield session


async def get_isolated_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: a session nothing commits on teardown.

    Whatever uses it commits its own writes; a failure there is never
    replayed by a later commit.
    """
    async with async_session_factory() as session:
        yield session


# ── Lifecycle ─────────────────────────────────────────────────────────────


async def check_connection() -> None:
    """Run ``SELECT 1``; raises whatever the driver raises when unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """Close every pooled connection."""
    await engine.dispose()
    logger.info("Database engine disposed")
