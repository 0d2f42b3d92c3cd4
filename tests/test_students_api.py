"""
HTTP-level tests for /api/students using FastAPI's TestClient.
"""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from students_api.app import create_app
from students_api.core.config import Settings
from students_api.db import models
from students_api.db.session import get_session

PETER = {"firstName": "Peter", "lastName": "Hằng", "program": "ICT"}


@pytest.fixture()
def app(temp_db):
    application = create_app()
    yield application
    application.state.engine.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app)


def _count_rows() -> int:
    with get_session() as session:
        return session.query(models.Student).count()


def test_list_empty_returns_200(client):
    resp = client.get("/api/students")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_returns_201_with_location(client):
    resp = client.post("/api/students", json=PETER)

    assert resp.status_code == 201
    body = resp.json()
    assert uuid.UUID(body["id"])
    assert {k: body[k] for k in PETER} == PETER
    assert resp.headers["location"] == f"http://testserver/api/students/{body['id']}"


def test_create_ignores_client_supplied_id(client):
    supplied = str(uuid.uuid4())
    resp = client.post("/api/students", json={**PETER, "id": supplied})

    assert resp.status_code == 201
    assert resp.json()["id"] != supplied


def test_created_ids_are_unique(client):
    ids = {client.post("/api/students", json=PETER).json()["id"] for _ in range(5)}
    assert len(ids) == 5


@pytest.mark.parametrize("missing", ["firstName", "lastName", "program"])
def test_create_missing_field_returns_400_and_persists_nothing(client, missing):
    payload = {k: v for k, v in PETER.items() if k != missing}
    resp = client.post("/api/students", json=payload)

    assert resp.status_code == 400
    assert resp.json()["error"] == "bad_request"
    assert missing in resp.json()["detail"]
    assert _count_rows() == 0


@pytest.mark.parametrize(
    "content",
    [b"not json", b"[1, 2]", b"", b'{"firstName": " ", "lastName": "x", "program": "y"}'],
)
def test_create_malformed_body_returns_400(client, content):
    resp = client.post("/api/students", content=content, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert _count_rows() == 0


def test_create_rejects_non_string_fields(client):
    resp = client.post("/api/students", json={**PETER, "program": 42})
    assert resp.status_code == 400


def test_get_returns_created_record(client):
    created = client.post("/api/students", json=PETER).json()

    resp = client.get(f"/api/students/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


def test_get_unknown_returns_404(client):
    resp = client.get(f"/api/students/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_get_malformed_id_returns_400(client):
    resp = client.get("/api/students/not-a-uuid")
    assert resp.status_code == 400


def test_get_accepts_uppercase_id(client):
    created = client.post("/api/students", json=PETER).json()
    resp = client.get(f"/api/students/{created['id'].upper()}")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]


def test_update_then_get_reflects_new_values(client):
    created = client.post("/api/students", json=PETER).json()
    changes = {"firstName": "Petra", "lastName": "Nguyen", "program": "Business"}

    first = client.put(f"/api/students/{created['id']}", json=changes)
    second = client.put(f"/api/students/{created['id']}", json=changes)

    assert first.status_code == 200
    assert first.json() == second.json() == {"id": created["id"], **changes}
    assert client.get(f"/api/students/{created['id']}").json() == {"id": created["id"], **changes}


def test_update_unknown_returns_404(client):
    resp = client.put(f"/api/students/{uuid.uuid4()}", json=PETER)
    assert resp.status_code == 404


def test_update_malformed_body_returns_400(client):
    created = client.post("/api/students", json=PETER).json()

    resp = client.put(f"/api/students/{created['id']}", json={"firstName": "Only"})
    assert resp.status_code == 400
    assert client.get(f"/api/students/{created['id']}").json() == created


def test_update_malformed_id_returns_400(client):
    resp = client.put("/api/students/123", json=PETER)
    assert resp.status_code == 400


def test_delete_returns_202_then_404(client):
    created = client.post("/api/students", json=PETER).json()

    resp = client.delete(f"/api/students/{created['id']}")
    assert resp.status_code == 202
    assert resp.content == b""

    assert client.get(f"/api/students/{created['id']}").status_code == 404
    assert client.delete(f"/api/students/{created['id']}").status_code == 404


def test_delete_malformed_id_returns_400(client):
    assert client.delete("/api/students/xyz").status_code == 400


def test_list_matches_live_records(client):
    ids = [client.post("/api/students", json=PETER).json()["id"] for _ in range(3)]
    client.delete(f"/api/students/{ids[1]}")

    resp = client.get("/api/students")
    assert resp.status_code == 200
    assert {s["id"] for s in resp.json()} == {ids[0], ids[2]}


def test_database_failure_returns_500_without_detail(app, client, monkeypatch):
    repo = app.state.student_repository

    def boom():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    monkeypatch.setattr(repo, "list_students", boom)
    resp = client.get("/api/students")

    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_error", "detail": "Internal server error"}
    assert "disk" not in resp.text


def test_unexpected_failure_returns_500(app, monkeypatch):
    repo = app.state.student_repository

    def boom(_student_id):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(repo, "get_student", boom)
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get(f"/api/students/{uuid.uuid4()}")

    assert resp.status_code == 500
    assert "secret" not in resp.text


def test_security_headers_present(client):
    resp = client.get("/api/students")
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"


def test_create_app_uses_database_from_settings(temp_db, tmp_path):
    other_db = tmp_path / "other.db"
    settings = Settings(
        app_env="test",
        database_url=f"sqlite:///{other_db}",
        log_level="INFO",
        cors_origins=(),
        create_tables_on_startup=True,
    )
    application = create_app(settings)
    try:
        resp = TestClient(application).post("/api/students", json=PETER)
        assert resp.status_code == 201
    finally:
        application.state.engine.dispose()

    assert other_db.exists()
    assert _count_rows() == 0


def test_running_app_module_starts_uvicorn(temp_db, monkeypatch):
    import runpy

    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("PORT", "8123")

    runpy.run_module("students_api.app", run_name="__main__")

    assert len(calls) == 1
    app, kwargs = calls[0]
    assert app.state.student_repository is not None
    assert kwargs == {"host": "127.0.0.1", "port": 8123}
    app.state.engine.dispose()
