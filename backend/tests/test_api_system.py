"""HTTP tests for the banner, health check and search placeholder."""

from fastapi.testclient import TestClient

from fresh_server.main import create_app
from fresh_server.store import MemoryConfigStore


def test_banner_includes_release():
    client = TestClient(create_app(MemoryConfigStore(), release="1.4.0"))

    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "fresh-server - build 1.4.0"


def test_banner_defaults_to_dev():
    client = TestClient(create_app(MemoryConfigStore()))
    assert client.get("/").text == "fresh-server - build dev"


def test_health_ok():
    client = TestClient(create_app(MemoryConfigStore()))

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.text == "ok"


def test_health_notok_when_disconnected():
    client = TestClient(create_app(MemoryConfigStore(connected=False)))

    response = client.get("/healthz")

    assert response.status_code == 500
    assert response.text == "notok"


def test_search_placeholder():
    client = TestClient(create_app(MemoryConfigStore()))

    response = client.get("/search")

    assert response.status_code == 200
    assert response.text == "Search GET!"
