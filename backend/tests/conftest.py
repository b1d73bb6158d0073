from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from fresh_server.config import reset_config
from fresh_server.main import create_app
from fresh_server.store import ConfigStore, MemoryConfigStore, SqlConfigStore

SERVE_VARS = ("SERVE_PORT", "SERVE_HOST", "SERVE_DATA", "SERVE_LOG_ENV", "SERVE_RELEASE")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test in an empty directory with no SERVE_* variables set."""
    for var in SERVE_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def memory_store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture()
async def sql_store() -> AsyncIterator[SqlConfigStore]:
    store = await SqlConfigStore.in_memory()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
async def store(request) -> AsyncIterator[ConfigStore]:
    """Each contract test runs once per store implementation."""
    if request.param == "memory":
        yield MemoryConfigStore()
        return
    sql = await SqlConfigStore.in_memory()
    yield sql
    await sql.close()


@pytest.fixture()
async def client(store) -> AsyncIterator[AsyncClient]:
    app = create_app(store, release="test")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
