"""Config storage engine backed by SQLite through async SQLAlchemy."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, nullcontext
from pathlib import Path

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from fresh_server.codec import Metadata, decode_metadata, encode_metadata
from fresh_server.database import IN_MEMORY_URL, create_engine, create_session_factory, init_db
from fresh_server.errors import NotFoundError, StorageError
from fresh_server.models import ConfigRecord
from fresh_server.schemas import ConfigEntry

logger = logging.getLogger(__name__)


def _to_entry(record: ConfigRecord) -> ConfigEntry:
    return ConfigEntry(
        id=record.id,
        name=record.name,
        metadata=decode_metadata(record.metadata_text),
        created=record.created_at,
    )


def _remove_database_files(path: Path) -> None:
    for candidate in (path, Path(f"{path}-wal"), Path(f"{path}-shm")):
        candidate.unlink(missing_ok=True)


class SqlConfigStore:
    """Persistent config store.

    Every operation is a single statement or a single transaction. Failures
    are never retried: driver errors surface as :class:`StorageError`, chained
    to the original exception.
    """

    def __init__(self, engine: AsyncEngine, *, serialize: bool = False) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._closed = False
        # An in-memory database is one shared connection, so only one
        # transaction may be open on it at a time.
        self._lock = asyncio.Lock() if serialize else None

    def _guard(self) -> asyncio.Lock | nullcontext[None]:
        return self._lock if self._lock is not None else nullcontext()

    @classmethod
    async def open(cls, path: str | Path, *, echo: bool = False) -> SqlConfigStore:
        """Open the database file at *path*.

        A file that does not exist yet gets the schema and the two seed
        entries. If that initialisation fails the half-created file is
        removed, so the next start tries again.
        """
        path = Path(path)
        needs_init = not path.exists()
        engine = create_engine(f"sqlite+aiosqlite:///{path}", echo=echo)
        store = cls(engine)
        try:
            await store._ping()
            if needs_init:
                await init_db(engine, seed=True)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            if needs_init:
                _remove_database_files(path)
            raise StorageError(f"unable to initialize database {path}: {e}") from e

        logger.info(
            "Opened database at %s (%s)", path, "initialized" if needs_init else "existing"
        )
        return store

    @classmethod
    async def in_memory(cls, *, seed: bool = False) -> SqlConfigStore:
        """Open a private in-memory database with a fresh schema."""
        engine = create_engine(IN_MEMORY_URL)
        try:
            await init_db(engine, seed=seed)
        except SQLAlchemyError as e:
            await engine.dispose()
            raise StorageError(f"unable to initialize in-memory database: {e}") from e
        return cls(engine, serialize=True)

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        async with self._guard():
            try:
                async with self._session_factory() as session:
                    yield session
            except SQLAlchemyError as e:
                logger.error("Failed to %s: %s", action, e)
                raise StorageError(f"failed to {action}: {e}") from e

    async def _ping(self) -> None:
        async with self._guard(), self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def insert(self, name: str, metadata: Metadata) -> int:
        record = ConfigRecord(name=name, metadata_text=encode_metadata(metadata))
        async with self._session(f"insert config {name!r}") as session:
            session.add(record)
            await session.commit()
        logger.debug("Inserted config %r with id %d", name, record.id)
        return record.id

    async def get_by_id(self, entry_id: int) -> ConfigEntry:
        async with self._session(f"get config {entry_id}") as session:
            record = await session.get(ConfigRecord, entry_id)
            if record is None:
                raise NotFoundError(f"config with id {entry_id} not found")
            return _to_entry(record)

    async def get_by_name(self, name: str) -> ConfigEntry:
        async with self._session(f"get config {name!r}") as session:
            result = await session.execute(
                select(ConfigRecord)
                .where(ConfigRecord.name == name)
                .order_by(ConfigRecord.id)
                .limit(1)
            )
            record = result.scalars().first()
            if record is None:
                raise NotFoundError(f"config {name!r} not found")
            return _to_entry(record)

    async def list_all(self) -> list[ConfigEntry]:
        async with self._session("list configs") as session:
            result = await session.execute(
                select(ConfigRecord).order_by(ConfigRecord.created_at, ConfigRecord.id)
            )
            return [_to_entry(record) for record in result.scalars()]

    async def update_by_name(self, name: str, metadata: Metadata) -> None:
        metadata_text = encode_metadata(metadata)
        async with self._session(f"update config {name!r}") as session:
            result = await session.execute(
                update(ConfigRecord)
                .where(ConfigRecord.name == name)
                .values({ConfigRecord.metadata_text: metadata_text})
            )
            await session.commit()
        logger.debug("Updated %d row(s) for config %r", result.rowcount, name)

    async def delete_by_name(self, name: str) -> None:
        async with self._session(f"delete config {name!r}") as session:
            result = await session.execute(
                delete(ConfigRecord).where(ConfigRecord.name == name)
            )
            await session.commit()
        logger.debug("Deleted %d row(s) for config %r", result.rowcount, name)

    async def is_connected(self) -> bool:
        if self._closed:
            return False
        try:
            await self._ping()
        except Exception as e:
            logger.warning("Database liveness probe failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        """Dispose of the engine connection pool."""
        self._closed = True
        await self._engine.dispose()
