"""Shared fixtures for chatrelay tests."""

import pytest
from fastapi.testclient import TestClient

from chatrelay.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point storage at a temp dir and reload settings for every test."""
    monkeypatch.setenv("CHATRELAY_STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.delenv("RELAY_ECHO_TO_SENDER", raising=False)
    monkeypatch.delenv("RELAY_SEND_TIMEOUT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    """A TestClient with the application lifespan (and its relay) running."""
    from chatrelay.main import app

    with TestClient(app) as client:
        yield client


def register_user(client, username, password="password123", email=None):
    response = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "display_name": username.title(),
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client, username, password="password123"):
    response = client.post(
        "/api/auth/token", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture
def make_token(client):
    """Register a user and return a valid access token for them."""

    def _make_token(username):
        register_user(client, username)
        return login(client, username)

    return _make_token
