"""End-to-end tests for sign-in, session and passkey flows."""

import pytest
from fastapi.testclient import TestClient

from identity.interface.api.app import create_app
from identity.interface.api.security import AUTH_COOKIE
from tests.di import build_test_container
from tests.harness import wire_projection


@pytest.fixture
def client():
    """Create test client with test container and in-process projection."""
    container = build_test_container(with_fastapi=True)
    app_instance = create_app(container)
    with TestClient(app_instance) as test_client:
        test_client.portal.call(wire_projection, container)
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSignIn:
    """Social sign-in."""

    def test_first_sign_in_creates_user(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "google", "credential": "g-mirror"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_new_user"] is True
        assert data["user"]["username"] == "g-mirror"
        assert data["user"]["status"] == "activated"
        assert response.cookies.get(AUTH_COOKIE) == data["token"]

    def test_second_sign_in_finds_user(self, client):
        body = {"provider": "line", "credential": "U4af4980629", "nonce": "n-1"}
        first = client.post("/api/v1/auth/sign-in", json=body).json()

        second = client.post("/api/v1/auth/sign-in", json=body).json()

        assert second["is_new_user"] is False
        assert second["user"]["user_id"] == first["user"]["user_id"]

    def test_unsupported_provider(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "facebook", "credential": "fb-1"},
        )

        assert response.status_code == 400

    def test_rejected_credential(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "google", "credential": "invalid"},
        )

        assert response.status_code == 401

    def test_unknown_provider_value(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "myspace", "credential": "x"},
        )

        assert response.status_code == 422


class TestSession:
    """Session cookie handling."""

    def test_auth_status_follows_cookie(self, client):
        assert client.get("/api/v1/auth/me").json()["authenticated"] is False

        client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "google", "credential": "g-mirror"},
        )
        signed_in = client.get("/api/v1/auth/me").json()
        assert signed_in["authenticated"] is True
        assert signed_in["user"]["user"]["username"] == "g-mirror"

        client.post("/api/v1/auth/logout")
        client.cookies.clear()
        assert client.get("/api/v1/auth/me").json()["authenticated"] is False

    def test_garbage_token(self, client):
        response = client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401


class TestPasskeys:
    """Passkey registration and login ceremonies."""

    def test_register_then_login(self, client):
        session = client.post(
            "/api/v1/auth/sign-in",
            json={"provider": "google", "credential": "g-mirror"},
        ).json()

        options = client.post("/api/v1/passkeys/registration/initialize")
        assert options.status_code == 200
        assert "publicKey" in options.json()["options"]

        bound = client.post(
            "/api/v1/passkeys/registration/finalize",
            json={"credential": {"id": "pk-1"}},
        )
        assert bound.status_code == 200
        providers = {a["provider"] for a in bound.json()["user"]["accounts"]}
        assert providers == {"google", "passkeys"}

        client.cookies.clear()
        login_options = client.post("/api/v1/passkeys/login/initialize", json={})
        assert login_options.status_code == 200

        login = client.post(
            "/api/v1/passkeys/login/finalize", json={"credential": {"id": "pk-1"}}
        )
        assert login.status_code == 200
        assert login.json()["user"]["user_id"] == session["user"]["user_id"]

    def test_registration_requires_session(self, client):
        response = client.post("/api/v1/passkeys/registration/initialize")

        assert response.status_code == 401

    def test_login_with_unknown_passkey(self, client):
        response = client.post(
            "/api/v1/passkeys/login/finalize", json={"credential": {"id": "pk-x"}}
        )

        assert response.status_code == 404
