from azure.core.exceptions import ServiceRequestError
from fastapi.testclient import TestClient

from outreach_cms.main import create_app
from tests.conftest import make_settings


def test_healthy(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    checks = body["checks"]
    assert checks["database"] is True
    assert checks["jwtSecret"] is True
    assert checks["databaseUrl"] is True
    assert checks["storage"] is True
    assert checks["environment"] == "test"
    assert body["timestamp"]


def test_missing_jwt_secret_is_unhealthy(engine, session_factory, store):
    app = create_app(make_settings(JWT_SECRET=None), engine=engine, session_factory=session_factory, object_store=store)
    with TestClient(app) as client:
        resp = client.get("/api/health")
    assert resp.status_code == 503
    assert resp.json()["status"] == "unhealthy"
    assert resp.json()["checks"]["jwtSecret"] is False


def test_missing_database_is_unhealthy(store):
    app = create_app(make_settings(), object_store=store)
    with TestClient(app) as client:
        resp = client.get("/api/health")
    assert resp.status_code == 503
    checks = resp.json()["checks"]
    assert checks["database"] is False
    assert checks["databaseUrl"] is False


def test_responses_carry_process_time_header(client):
    resp = client.get("/api/health")
    assert float(resp.headers["X-Process-Time"]) >= 0


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nowhere")
    assert (resp.status_code, resp.json()) == (404, {"error": "Not Found"})


def test_unreachable_storage_is_reported_but_not_fatal(client, store):
    store.ready = False
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["checks"]["storage"] is False


def test_storage_errors_are_reported_as_not_ready(client, store, monkeypatch):
    def broken():
        raise ServiceRequestError("connection refused")

    monkeypatch.setattr(store, "is_ready", broken)
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["checks"]["storage"] is False
