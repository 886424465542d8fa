"""Tests for authentication API endpoints."""

from datetime import timedelta

from chatrelay.utils.auth import create_access_token
from conftest import login, register_user


def test_register_user(client):
    """Test registering a new user."""
    new_user = {
        "username": "testuser",
        "email": "test@example.com",
        "display_name": "Test User",
        "password": "password123",
    }
    response = client.post("/api/auth/register", json=new_user)
    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "testuser"
    assert data["email"] == "test@example.com"
    assert data["display_name"] == "Test User"
    assert "password" not in data
    assert "hashed_password" not in data


def test_register_defaults_display_name(client):
    data = register_user(client, "plain")
    response = client.post(
        "/api/auth/register",
        json={"username": "nodisplay", "email": "n@example.com", "password": "pw"},
    )
    assert response.status_code == 201
    assert response.json()["display_name"] == "nodisplay"
    assert data["display_name"] == "Plain"


def test_register_duplicate_username(client):
    register_user(client, "dupe")
    response = client.post(
        "/api/auth/register",
        json={"username": "dupe", "email": "other@example.com", "password": "pw"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_duplicate_email(client):
    register_user(client, "first", email="shared@example.com")
    response = client.post(
        "/api/auth/register",
        json={"username": "second", "email": "SHARED@example.com", "password": "pw"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_rejects_missing_fields(client):
    response = client.post("/api/auth/register", json={"username": "incomplete"})
    assert response.status_code == 422


def test_login(client):
    """Test user login and token generation."""
    register_user(client, "loginuser")
    response = client.post(
        "/api/auth/token", json={"username": "loginuser", "password": "password123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"


def test_login_wrong_password(client):
    register_user(client, "wrongpw")
    response = client.post(
        "/api/auth/token", json={"username": "wrongpw", "password": "nope"}
    )
    assert response.status_code == 401


def test_login_unknown_user(client):
    response = client.post(
        "/api/auth/token", json={"username": "ghost", "password": "password123"}
    )
    assert response.status_code == 401


def test_me_endpoint(client):
    """Test the /me endpoint with authentication."""
    register_user(client, "meuser")
    token = login(client, "meuser")

    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "meuser"
    assert data["email"] == "meuser@example.com"


def test_verify_endpoint(client):
    register_user(client, "verifier")
    token = login(client, "verifier")
    response = client.get("/api/auth/verify", headers={"Authorization": token})
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "verifier"


def test_unauthorized_access(client):
    """Test that endpoints requiring authentication reject unauthorized requests."""
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/users/").status_code == 401

    headers = {"Authorization": "Bearer garbage"}
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_expired_token_rejected(client):
    register_user(client, "expired")
    token = create_access_token("expired", expires_delta=timedelta(seconds=-1))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_unknown_user_rejected(client):
    token = create_access_token("nobody")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_bracketed_username_registers_and_logs_in(client):
    """Usernames that look like console markup are plain text everywhere."""
    data = register_user(client, "[/evil]")
    assert data["username"] == "[/evil]"

    response = client.post(
        "/api/auth/token", json={"username": "[/evil]", "password": "wrong"}
    )
    assert response.status_code == 401

    response = client.post(
        "/api/auth/token", json={"username": "[bold]nobody", "password": "wrong"}
    )
    assert response.status_code == 401

    token = login(client, "[/evil]")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "[/evil]"


def test_password_hashing_runs_off_the_event_loop(client, monkeypatch):
    import asyncio

    from chatrelay.api.endpoints import auth as auth_endpoints
    from chatrelay.utils import auth as auth_utils

    threads = []

    def record_thread():
        try:
            asyncio.get_running_loop()
            threads.append("event loop")
        except RuntimeError:
            threads.append("worker")

    def hash_password(password):
        record_thread()
        return auth_utils.pwd_context.hash(password)

    def verify_password(plain_password, hashed_password):
        record_thread()
        return auth_utils.pwd_context.verify(plain_password, hashed_password)

    monkeypatch.setattr(auth_endpoints, "hash_password", hash_password)
    monkeypatch.setattr(auth_utils, "verify_password", verify_password)

    register_user(client, "worker")
    login(client, "worker")

    assert threads == ["worker", "worker"]
