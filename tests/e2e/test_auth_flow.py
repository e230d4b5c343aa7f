"""End-to-end tests for registration, login and the response envelope."""

import pytest
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from crew.interface.api.app import create_app
from tests.conftest import TEST_PASSWORD, bearer, register
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client with test container."""
    return TestClient(create_app(build_test_container(None, FastapiProvider())))


class TestAuthFlow:
    """End-to-end tests for email/password authentication."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"
        assert body["data"]["environment"] == "test"

    def test_register_returns_token_and_user(self, client):
        # Act
        response = client.post(
            "/auth/register",
            json={
                "name": "Alice",
                "email": "Alice@Example.com",
                "password": "secret1",
                "bio": "Board games",
            },
        )

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["token"]
        user = body["data"]["user"]
        assert user["email"] == "alice@example.com"
        assert user["bio"] == "Board games"
        assert "password_hash" not in user
        assert "password" not in user

    def test_duplicate_email_rejected(self, client):
        register(client, "Alice", "alice@example.com")

        response = client.post(
            "/auth/register",
            json={"name": "Alice 2", "email": "ALICE@example.com", "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "User already exists with this email",
            "data": None,
        }

    def test_short_password_rejected(self, client):
        response = client.post(
            "/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "123"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at least 6 characters"

    def test_malformed_body_is_400(self, client):
        response = client.post("/auth/register", json={"name": "Alice"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_login_and_me(self, client):
        # Arrange
        register(client, "Alice", "alice@example.com")

        # Act
        login = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        token = login.json()["data"]["token"]
        me = client.get("/auth/me", headers=bearer(token))

        # Assert
        assert login.status_code == 200
        assert login.json()["message"] == "Login successful"
        assert me.status_code == 200
        assert me.json()["data"]["name"] == "Alice"
        assert me.json()["data"]["groups"] == []

    def test_wrong_password_is_401(self, client):
        register(client, "Alice", "alice@example.com")

        response = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "nope-nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_missing_token_is_401(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, no token"

    def test_bad_token_is_401(self, client):
        response = client.get("/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["success"] is False
