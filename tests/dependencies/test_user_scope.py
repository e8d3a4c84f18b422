"""Tests for identity resolution and scoped sessions at the HTTP boundary."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from folio.main import app
from folio.services.auth import SessionCredentialStrategy
from folio.services.schema_lifecycle import SchemaInitializationError, SchemaState
from folio.services.session_scope import StorageUnavailableError

SECRET = "test-secret-key"


def bearer(user_id: int) -> dict:
    payload = {
        "sub": str(user_id),
        "type": "access",
        "exp": datetime.now(UTC) + timedelta(minutes=15),
    }
    return {"Authorization": f"Bearer {jwt.encode(payload, SECRET, algorithm='HS256')}"}


class TestSessionCredentials:
    """Requests under the production identity strategy."""

    def test_valid_token_resolves_identity(self, client, user_a, user_b):
        app.state.identity_strategy = SessionCredentialStrategy(SECRET)

        response = client.get("/api/users/me", headers=bearer(user_b.id))

        assert response.status_code == 200
        assert response.json()["email"] == "bob@example.com"

    def test_missing_token_is_unauthorized(self, client, user_a):
        app.state.identity_strategy = SessionCredentialStrategy(SECRET)

        response = client.get("/api/portfolios")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "Unauthorized"

    def test_tampered_token_is_unauthorized(self, client, user_a):
        app.state.identity_strategy = SessionCredentialStrategy("another-secret")
        assert client.get("/api/portfolios", headers=bearer(user_a.id)).status_code == 401

    def test_unconfigured_secret_fails_closed(self, client, user_a):
        """No fallback identity: every tenant request is refused."""
        app.state.identity_strategy = SessionCredentialStrategy("")

        response = client.get("/api/portfolios", headers=bearer(user_a.id))

        assert response.status_code == 500
        assert response.json()["error"] == "IdentityNotConfigured"


class TestScopedSession:
    """Schema and storage handling of get_scoped_db."""

    def test_first_request_initializes_schema(self, client, user_a):
        lifecycle = app.state.schema_lifecycle
        assert lifecycle.state is SchemaState.UNINITIALIZED

        client.get("/api/portfolios")

        assert lifecycle.state is SchemaState.INITIALIZED

    def test_storage_unavailable_is_503(self, client):
        with patch(
            "folio.dependencies.user_scope.bind_session_identity",
            side_effect=StorageUnavailableError("Database connection failed"),
        ):
            response = client.get("/api/portfolios")

        assert response.status_code == 503
        assert response.json()["error"] == "StorageUnavailable"

    def test_schema_failure_is_503_and_retried(self, client, user_a):
        lifecycle = app.state.schema_lifecycle
        with patch.object(
            lifecycle, "ensure", side_effect=SchemaInitializationError("migration failed")
        ):
            assert client.get("/api/portfolios").status_code == 503

        assert client.get("/api/portfolios").status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
