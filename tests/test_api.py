"""상품 REST API 테스트 (FastAPI TestClient + 임시 SQLite)"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import infrastructure.persistence.models  # noqa: F401
from infrastructure.persistence.database import Base, get_session
from main import create_app


@pytest.fixture
def client(tmp_path):
    db_path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)


def create(client, name="신라면", **extra):
    response = client.post("/api/products", json={"name": name, **extra})
    assert response.status_code == 201
    return response.json()["data"]


class TestProductsApi:
    def test_create_and_get(self, client):
        created = create(client, "  신라면 ")
        assert created["name"] == "신라면"
        assert created["status"] == "pending"
        assert created["source"] == "manual"

        response = client.get(f"/api/products/{created['id']}")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == created["id"]
        assert body["data"]["name"] == "신라면"

    def test_create_with_description_is_completed(self, client):
        created = create(client, "a", description="설명", status="pending")
        assert created["status"] == "completed"

    def test_create_invalid_name(self, client):
        response = client.post("/api/products", json={"name": "   "})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"

    def test_list_newest_first_and_idempotent(self, client):
        first = create(client, "a")
        second = create(client, "b")
        response = client.get("/api/products")
        ids = [p["id"] for p in response.json()["data"]]
        assert set(ids) == {first["id"], second["id"]}
        assert client.get("/api/products").json() == response.json()

    def test_batch_create(self, client):
        response = client.post("/api/products/batch", json={"products": [
            {"name": "a", "source": "excel"}, {"name": "b", "source": "excel"},
        ]})
        assert response.status_code == 201
        data = response.json()["data"]
        assert [p["name"] for p in data] == ["a", "b"]
        assert len(client.get("/api/products").json()["data"]) == 2

    def test_batch_create_is_atomic(self, client):
        response = client.post("/api/products/batch", json={"products": [{"name": "a"}, {"name": ""}]})
        assert response.status_code == 400
        assert client.get("/api/products").json()["data"] == []

    def test_batch_create_empty(self, client):
        response = client.post("/api/products/batch", json={"products": []})
        assert response.status_code == 400

    def test_update_description_forces_completed(self, client):
        created = create(client)
        client.put(f"/api/products/{created['id']}", json={"status": "error", "error_message": "실패"})
        response = client.put(f"/api/products/{created['id']}", json={"description": "매콤한 라면"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["description"] == "매콤한 라면"
        assert data["error_message"] is None

    def test_update_status(self, client):
        created = create(client)
        response = client.put(f"/api/products/{created['id']}", json={"status": "processing"})
        assert response.json()["data"]["status"] == "processing"

    def test_completed_without_description_rejected(self, client):
        created = create(client)
        response = client.put(f"/api/products/{created['id']}", json={"status": "completed"})
        assert response.status_code == 400

    def test_update_missing(self, client):
        response = client.put("/api/products/missing", json={"name": "x"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_delete(self, client):
        created = create(client)
        response = client.delete(f"/api/products/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"/api/products/{created['id']}").status_code == 404
        assert client.delete(f"/api/products/{created['id']}").status_code == 404

    def test_unknown_route(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Not found: GET /api/unknown"

    def test_request_id_header(self, client):
        response = client.get("/api/products", headers={"X-Request-Id": "req-1"})
        assert response.headers["X-Request-Id"] == "req-1"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert "timestamp" in body
