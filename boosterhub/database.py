"""
Database Connection Management
The engine is built from settings by the app factory; each request gets its own connection
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from boosterhub.config import Settings
from boosterhub.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Metadata for models
metadata = MetaData()

# Base class for models
Base = declarative_base(metadata=metadata)


def _normalize_postgres(url: str) -> str:
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def async_database_url(url: str) -> str:
    """Map a database URL to the async driver used by the service"""
    url = _normalize_postgres(url)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def sync_database_url(url: str) -> str:
    """Map a database URL to the driver used by the sync scripts"""
    url = _normalize_postgres(url)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite+aiosqlite://", "sqlite://", 1)
    return url


def build_engine(settings: Settings) -> Optional[AsyncEngine]:
    """
    Construct the async engine for the configured URL

    Returns None when DATABASE_URL is not set; requests that need the
    database then fail with ConfigurationError.
    """
    if not settings.DATABASE_URL:
        logger.error("DATABASE_URL not configured")
        return None

    url = make_url(async_database_url(settings.DATABASE_URL))

    if url.get_backend_name() == "sqlite":
        return create_async_engine(url)

    # Connection poolers (pgbouncer, Neon/Supabase) do not support prepared statements
    if "pooler" in settings.DATABASE_URL or "neon.tech" in settings.DATABASE_URL:
        url = url.update_query_dict({"prepared_statement_cache_size": "0"})
        return create_async_engine(
            url,
            pool_size=5,
            pool_pre_ping=True,
            connect_args={"statement_cache_size": 0},
        )

    return create_async_engine(url, pool_size=10, pool_pre_ping=True)


def build_sync_engine(settings: Settings) -> Engine:
    """SQLAlchemy engine for table creation and maintenance scripts"""
    if not settings.DATABASE_URL:
        raise ConfigurationError("DATABASE_URL not configured")
    return create_engine(sync_database_url(settings.DATABASE_URL))


async def dispose_engine(engine: Optional[AsyncEngine]) -> None:
    """Close pooled connections on shutdown"""
    if engine is None:
        return
    await engine.dispose()
    logger.info("Database connections closed")


async def get_connection(request: Request) -> AsyncIterator[AsyncConnection]:
    """
    Dependency yielding a connection from the application's engine

    Writes are committed explicitly by the services; anything left
    uncommitted is rolled back when the connection is returned.
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ConfigurationError("DATABASE_URL not configured")

    async with engine.connect() as connection:
        yield connection
