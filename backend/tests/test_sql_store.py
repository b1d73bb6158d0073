"""Tests specific to the SQLite-backed store: seeding, files, transactions."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

import fresh_server.database as database_module
from fresh_server.database import IN_MEMORY_URL, create_engine, init_db
from fresh_server.errors import DecodeError, StorageError
from fresh_server.store import SqlConfigStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def test_open_new_file_creates_schema_and_seeds(tmp_path):
    path = tmp_path / "state.db"

    store = await SqlConfigStore.open(path)
    try:
        entries = await store.list_all()
    finally:
        await store.close()

    assert path.exists()
    assert [e.name for e in entries] == ["datacenter-1", "datacenter-2"]
    assert entries[0].metadata == {
        "monitoring": {"enabled": "true"},
        "limits": {"cpu": {"enabled": "false", "value": "300m"}},
    }
    assert entries[1].metadata["limits"]["cpu"] == {"enabled": "true", "value": "250m"}

    now = _utcnow()
    assert timedelta(days=59) < now - entries[0].created < timedelta(days=61)
    assert timedelta(days=13) < now - entries[1].created < timedelta(days=15)


async def test_new_entries_list_after_seeds(tmp_path):
    store = await SqlConfigStore.open(tmp_path / "state.db")
    try:
        await store.insert("fresh", {"enabled": True})
        names = [e.name for e in await store.list_all()]
    finally:
        await store.close()

    assert names == ["datacenter-1", "datacenter-2", "fresh"]


async def test_existing_file_is_not_reseeded(tmp_path):
    path = tmp_path / "state.db"

    store = await SqlConfigStore.open(path)
    await store.delete_by_name("datacenter-1")
    await store.insert("kept", {"a": "1"})
    await store.close()

    store = await SqlConfigStore.open(path)
    try:
        names = [e.name for e in await store.list_all()]
    finally:
        await store.close()

    assert names == ["datacenter-2", "kept"]


async def test_ids_are_not_reused_after_delete(tmp_path):
    store = await SqlConfigStore.open(tmp_path / "state.db")
    try:
        first = await store.insert("temp", {})
        await store.delete_by_name("temp")
        second = await store.insert("temp", {})
    finally:
        await store.close()

    assert second > first


async def test_open_in_missing_directory_fails(tmp_path):
    with pytest.raises(StorageError, match="unable to initialize database"):
        await SqlConfigStore.open(tmp_path / "missing" / "state.db")


async def test_failed_initialization_removes_file(tmp_path, monkeypatch):
    path = tmp_path / "state.db"
    monkeypatch.setattr(
        database_module,
        "SEED_CONFIGS",
        (("ok", "{}", "-1 days"), (None, "{}", "-1 days")),
    )

    with pytest.raises(StorageError):
        await SqlConfigStore.open(path)

    assert not path.exists()


async def test_initialization_is_all_or_nothing(monkeypatch):
    monkeypatch.setattr(
        database_module,
        "SEED_CONFIGS",
        (("ok", "{}", "-1 days"), (None, "{}", "-1 days")),
    )
    engine = create_engine(IN_MEMORY_URL)
    try:
        with pytest.raises(Exception):
            await init_db(engine, seed=True)

        async with engine.connect() as conn:
            result = await conn.execute(
                text("SELECT name FROM sqlite_master WHERE type = 'table'")
            )
            tables = [row[0] for row in result]
    finally:
        await engine.dispose()

    assert "configs" not in tables


async def test_in_memory_seeding_is_optional():
    seeded = await SqlConfigStore.in_memory(seed=True)
    empty = await SqlConfigStore.in_memory()
    try:
        assert len(await seeded.list_all()) == 2
        assert await empty.list_all() == []
    finally:
        await seeded.close()
        await empty.close()


async def test_undecodable_row_raises_decode_error(sql_store):
    await sql_store.insert("broken", {"a": "1"})
    async with sql_store._engine.begin() as conn:
        await conn.execute(text("UPDATE configs SET metadata = 'nope' WHERE name = 'broken'"))

    with pytest.raises(DecodeError):
        await sql_store.get_by_name("broken")


async def test_metadata_column_holds_compact_json(sql_store):
    await sql_store.insert("abc", {"b": True, "a": {"c": "1"}})

    async with sql_store._engine.connect() as conn:
        result = await conn.execute(text("SELECT metadata FROM configs WHERE name = 'abc'"))
        stored = result.scalar_one()

    assert stored == '{"a":{"c":"1"},"b":true}'


async def test_schema_has_created_index(sql_store):
    async with sql_store._engine.connect() as conn:
        result = await conn.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = 'configs'")
        )
        indexes = [row[0] for row in result]

    assert "idx_configs_created" in indexes


async def test_storage_failure_is_wrapped(sql_store):
    async with sql_store._engine.begin() as conn:
        await conn.execute(text("DROP TABLE configs"))

    with pytest.raises(StorageError, match="failed to list configs"):
        await sql_store.list_all()
