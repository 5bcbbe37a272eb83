from fastapi.testclient import TestClient

from catalog.main import create_app

from conftest import InMemoryProductStore


def test_health_200_when_db_ok():
    app = create_app(store_factory=lambda: InMemoryProductStore(ok=True))
    with TestClient(app) as c:
        r = c.get("/health")
        assert r.status_code == 200
        assert r.json()["db_connected"] is True


def test_health_503_when_db_down():
    app = create_app(store_factory=lambda: InMemoryProductStore(ok=False))
    with TestClient(app) as c:
        r = c.get("/health")
        assert r.status_code == 503
        assert r.json()["db_connected"] is False


def test_root():
    app = create_app(store_factory=lambda: InMemoryProductStore())
    with TestClient(app) as c:
        assert c.get("/").json()["status"] == "running"
