"""SQLite database setup with async SQLAlchemy."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from sqlalchemy import event, func, insert
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import ConnectionPoolEntry, StaticPool

logger = logging.getLogger(__name__)

IN_MEMORY_URL = "sqlite+aiosqlite://"


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


# (name, metadata text, age modifier for datetime('now', ...)) in insert order
SEED_CONFIGS: tuple[tuple[str, str, str], ...] = (
    (
        "datacenter-1",
        '{"limits":{"cpu":{"enabled":"false","value":"300m"}},"monitoring":{"enabled":"true"}}',
        "-60 days",
    ),
    (
        "datacenter-2",
        '{"limits":{"cpu":{"enabled":"true","value":"250m"}},"monitoring":{"enabled":"true"}}',
        "-14 days",
    ),
)


def _install_sqlite_connect_hooks(engine: AsyncEngine, *, wal: bool) -> None:
    """Install SQLite pragmas and hand transaction control to SQLAlchemy.

    The driver's implicit transaction handling never wraps DDL, so it is
    switched off and ``BEGIN`` is emitted explicitly. That makes schema
    creation and seed inserts a single atomic unit.
    """

    def on_connect(dbapi_conn: sqlite3.Connection, _conn_record: ConnectionPoolEntry) -> None:
        dbapi_conn.isolation_level = None
        cur = dbapi_conn.cursor()
        if wal:
            cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA busy_timeout=30000;")  # 30s
        cur.execute("PRAGMA temp_store=MEMORY;")
        cur.close()

    def on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    event.listen(engine.sync_engine, "connect", on_connect)
    event.listen(engine.sync_engine, "begin", on_begin)


def create_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a file URL or :data:`IN_MEMORY_URL`.

    An in-memory database lives only as long as its connection, so it is
    pinned to a single shared connection.
    """
    in_memory = url == IN_MEMORY_URL or ":memory:" in url
    if in_memory:
        engine = create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    _install_sqlite_connect_hooks(engine, wal=not in_memory)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def _insert_seeds(conn: AsyncConnection) -> None:
    from fresh_server.models import ConfigRecord

    for name, metadata_text, age in SEED_CONFIGS:
        await conn.execute(
            insert(ConfigRecord).values(
                {
                    ConfigRecord.name: name,
                    ConfigRecord.metadata_text: metadata_text,
                    ConfigRecord.created_at: func.datetime("now", age),
                }
            )
        )


async def init_db(engine: AsyncEngine, *, seed: bool) -> None:
    """Create the schema, optionally with seed entries, in one transaction."""
    # Import all models so they register with Base.metadata
    import fresh_server.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if seed:
            await _insert_seeds(conn)
    logger.info("Database schema created (seeded=%s)", seed)
