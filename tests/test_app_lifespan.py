"""Tests for application startup against real storage."""
import json

from fastapi.testclient import TestClient


def test_startup_initializes_storage_and_serves_requests(monkeypatch, tmp_path):
    """The lifespan creates both collection files and wires the store."""
    storage_dir = tmp_path / "storage"
    monkeypatch.setenv("STORAGE_DIR", str(storage_dir))

    from usage_backend.main import app

    with TestClient(app) as client:
        assert json.loads((storage_dir / "users.json").read_text()) == []
        assert json.loads((storage_dir / "activity.json").read_text()) == []

        response = client.post("/api/register", json={"id": "u1", "username": "a", "email": "a@x.com"})
        assert response.status_code == 200

        response = client.get("/api/users")

    assert [user["id"] for user in response.json()["users"]] == ["u1"]
    stored = json.loads((storage_dir / "users.json").read_text())
    assert stored[0]["email"] == "a@x.com"


def test_startup_keeps_existing_users(monkeypatch, tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    (storage_dir / "users.json").write_text(json.dumps([
        {"id": "old", "username": "o", "email": "o@x.com", "registeredAt": "2024-01-01T00:00:00.000Z"},
    ]))
    monkeypatch.setenv("STORAGE_DIR", str(storage_dir))

    from usage_backend.main import app

    with TestClient(app) as client:
        stats = client.get("/api/stats").json()

    assert stats == {"totalUsers": 1, "activeToday": 0, "totalMessages": 0}
