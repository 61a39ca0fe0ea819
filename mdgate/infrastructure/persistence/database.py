"""Database engine and session factory creation."""

import logging
import os
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mdgate.config import DatabaseConfig
from mdgate.domain.shared.error import ConfigurationError
from mdgate.infrastructure.persistence.tables import metadata

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("sqlite", "postgresql")


def _expand_sqlite_path(url: str) -> str:
    """Expand ~ in SQLite URLs and ensure parent directory exists."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return url

    # Extract path from URL (sqlite+aiosqlite:///path or sqlite:///path)
    prefix_end = url.index("///") + 3
    prefix = url[:prefix_end]
    path = url[prefix_end:]

    abs_path = os.path.abspath(os.path.expanduser(path))
    Path(abs_path).parent.mkdir(parents=True, exist_ok=True)

    return f"{prefix}{abs_path}"


def _begin_immediate(engine: AsyncEngine) -> None:
    """Make every SQLite transaction take the write lock when it starts.

    Concurrent writers then queue on the busy timeout instead of failing
    with "database is locked" when a deferred transaction upgrades.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create async database engine.

    Handles SQLite and PostgreSQL with appropriate settings.

    Raises:
        ConfigurationError: If the URL names any other database backend
    """
    url = _expand_sqlite_path(config.url)

    backend = make_url(url).get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigurationError(
            f"Unsupported catalogue database {backend!r}, use one of {SUPPORTED_BACKENDS}",
            code="unsupported_database",
        )

    if backend == "sqlite":
        engine_kwargs: dict[str, Any] = {"echo": config.echo}
        if ":memory:" in url:
            # An in-memory database only exists on its one connection
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine = create_async_engine(url, **engine_kwargs)
        _begin_immediate(engine)
        return engine

    return create_async_engine(
        url,
        echo=config.echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory for dependency injection."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create catalogue tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("File catalogue tables ready")
