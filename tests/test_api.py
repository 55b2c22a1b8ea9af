"""Tests for the HTTP API."""
import json

import pytest
from httpx import AsyncClient, ASGITransport

API_BASE_URL = "http://test"


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url=API_BASE_URL)


@pytest.mark.asyncio
async def test_register_then_list_users(test_app):
    """POST /api/register persists the user; GET /api/users returns it once."""
    payload = {"id": "u1", "username": "a", "email": "a@x.com"}

    async with _client(test_app) as client:
        response = await client.post("/api/register", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "message" not in data
        assert data["user"]["id"] == "u1"
        assert data["user"]["version"] == "1.0.0"
        assert data["user"]["registeredAt"].endswith("Z")
        assert data["user"]["lastActive"].endswith("Z")

        response = await client.get("/api/users")

    assert response.status_code == 200
    users = response.json()["users"]
    assert [user["id"] for user in users] == ["u1"]


@pytest.mark.asyncio
async def test_register_duplicate_returns_existing_user(test_app):
    """A second registration with the same email is a 200 with a message."""
    async with _client(test_app) as client:
        first = await client.post("/api/register", json={"id": "u1", "username": "a", "email": "a@x.com"})
        second = await client.post("/api/register", json={"id": "u2", "username": "b", "email": "a@x.com"})
        users = (await client.get("/api/users")).json()["users"]

    assert second.status_code == 200
    data = second.json()
    assert data["message"] == "User already registered"
    assert "success" not in data
    assert data["user"] == first.json()["user"]
    assert len(users) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"username": "a", "email": "a@x.com"},
        {"id": "u1", "email": "a@x.com"},
        {"id": "u1", "username": "a"},
        {"id": "", "username": "a", "email": "a@x.com"},
        {},
    ],
)
async def test_register_missing_fields_returns_400(test_app, record_store, payload):
    async with _client(test_app) as client:
        response = await client.post("/api/register", json=payload)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "missing_required_fields"
    assert detail["fields"]
    assert json.loads(record_store.users_path.read_text()) == []


@pytest.mark.asyncio
async def test_log_activity_and_stats(test_app):
    """Activity updates lastActive and stop events feed totalMessages."""
    async with _client(test_app) as client:
        await client.post("/api/register", json={"id": "u1", "username": "a", "email": "a@x.com"})

        response = await client.post("/api/activity", json={"userId": "u1", "action": "start"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        await client.post("/api/activity", json={"userId": "u1", "action": "stop", "messagesSent": 7})
        await client.post("/api/activity", json={"userId": "ghost", "action": "stop", "messagesSent": 3})
        await client.post("/api/activity", json={"userId": "u1", "action": "progress", "messagesSent": 50})

        activity = (await client.get("/api/activity")).json()["activity"]
        stats = (await client.get("/api/stats")).json()

    assert [event["action"] for event in activity] == ["start", "stop", "stop", "progress"]
    assert activity[0]["messagesSent"] == 0
    assert stats == {"totalUsers": 1, "activeToday": 1, "totalMessages": 10}


@pytest.mark.asyncio
async def test_log_activity_with_client_timestamp(test_app):
    """A client-supplied timestamp becomes the user's lastActive."""
    async with _client(test_app) as client:
        await client.post("/api/register", json={"id": "u1", "username": "a", "email": "a@x.com"})
        await client.post(
            "/api/activity",
            json={"userId": "u1", "action": "stop", "timestamp": "2024-02-03T04:05:06.000Z"},
        )
        users = (await client.get("/api/users")).json()["users"]
        stats = (await client.get("/api/stats")).json()

    assert users[0]["lastActive"] == "2024-02-03T04:05:06Z"
    assert stats["activeToday"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"action": "start"},
        {"userId": "u1"},
        {"userId": "u1", "action": ""},
    ],
)
async def test_log_activity_missing_fields_returns_400(test_app, record_store, payload):
    async with _client(test_app) as client:
        response = await client.post("/api/activity", json=payload)

    assert response.status_code == 400
    assert json.loads(record_store.activity_path.read_text()) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"userId": "u1", "action": "stop", "messagesSent": -1},
        {"userId": "u1", "action": "stop", "messagesSent": "many"},
        {"userId": "u1", "action": "stop", "timestamp": "not-a-date"},
    ],
)
async def test_log_activity_malformed_payload_returns_400(test_app, payload):
    """Type errors are reported field by field."""
    async with _client(test_app) as client:
        response = await client.post("/api/activity", json=payload)

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Request validation failed"
    assert data["errors"]


@pytest.mark.asyncio
async def test_storage_write_failure_returns_500(test_app, record_store):
    """A failing write is reported as a generic 500."""
    record_store.users_path.unlink()
    record_store.users_path.mkdir()

    async with _client(test_app) as client:
        response = await client.post("/api/register", json={"id": "u1", "username": "a", "email": "a@x.com"})

    assert response.status_code == 500
    assert response.json() == {"detail": "registration_failed"}


@pytest.mark.asyncio
async def test_dashboard_serves_html(test_app):
    async with _client(test_app) as client:
        response = await client.get("/dashboard")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/api/stats" in response.text
    assert "setInterval(loadData, REFRESH_MS)" in response.text
    assert "const REFRESH_MS = 10000;" in response.text


@pytest.mark.asyncio
async def test_health_and_root(test_app):
    async with _client(test_app) as client:
        health = await client.get("/health")
        root = await client.get("/")

    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert root.json()["dashboard"] == "/dashboard"
