# =============================================================================
# tests/test_auth.py - Registration and Login Tests
# =============================================================================
# Endpoint tests against the in-memory store.
#
# Run with: poetry run pytest tests/test_auth.py -v
# =============================================================================

from unittest.mock import AsyncMock

import pytest

from lib.database import DuplicateKeyViolation, UserStore
from lib.security import decode_jwt


# =============================================================================
# Registration
# =============================================================================

class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_slugs_handle(self, register, store):
        """'Alice!' is stored as 'alice'."""
        response = register(handle="Alice!")

        assert response.status_code == 201
        assert response.text == "account created"
        assert store.by_handle("alice") is not None

    def test_password_stored_hashed(self, register, store):
        """The raw password is never persisted."""
        register(password="p1")

        user = store.by_handle("alice")
        assert user["password"] != "p1"
        assert user["password"].startswith("$2")

    def test_email_normalized(self, register, store):
        register(email="  A@X.COM ")
        assert store.by_handle("alice")["email"] == "a@x.com"

    def test_duplicate_email(self, register):
        """Same email twice: one 201, one 409."""
        first = register(email="a@x.com", handle="alice")
        second = register(email="a@x.com", handle="bob")

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"error": "a user with that email is already registered"}

    def test_duplicate_slugged_handle(self, register):
        """'Alice!' then 'alice' collide after slugging."""
        first = register(email="a@x.com", handle="Alice!")
        second = register(email="b@x.com", handle="alice")

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"error": "handle not available"}

    def test_duplicate_handle_either_order(self, register):
        first = register(email="b@x.com", handle="alice")
        second = register(email="a@x.com", handle="Alice!")

        assert first.status_code == 201
        assert second.status_code == 409

    def test_handle_without_letters(self, register):
        response = register(handle="!!!")

        assert response.status_code == 400
        assert "error" in response.json()

    def test_long_passphrase(self, register, login):
        """Passwords past bcrypt's 72-byte limit still register and log in."""
        passphrase = "correct horse battery staple " * 4

        response = register(password=passphrase)

        assert response.status_code == 201
        assert login(password=passphrase).status_code == 200

    @pytest.mark.parametrize("handle", ["health", "User", "search!"])
    def test_route_names_are_reserved(self, register, store, handle):
        """Handles that would be shadowed by fixed routes are refused."""
        response = register(handle=handle)

        assert response.status_code == 409
        assert response.json() == {"error": "handle not available"}
        assert store.users == {}

    def test_race_on_insert_maps_to_conflict(self, register, monkeypatch):
        """A unique-index violation from the store still yields 409."""
        monkeypatch.setattr(UserStore, "find_user", AsyncMock(return_value=None))
        monkeypatch.setattr(
            UserStore, "insert_user", AsyncMock(side_effect=DuplicateKeyViolation("email"))
        )

        response = register()

        assert response.status_code == 409
        assert response.json() == {"error": "a user with that email is already registered"}

    def test_missing_fields(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "a@x.com"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"handle", "name", "password"} <= fields


# =============================================================================
# Login
# =============================================================================

class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_returns_bare_token(self, register, login, store):
        register()
        response = login()

        assert response.status_code == 200
        claims = decode_jwt(response.text)
        assert claims["id"] == store.by_handle("alice")["id"]

    def test_wrong_password(self, register, login):
        """401 and no token."""
        register()
        response = login(password="wrong")

        assert response.status_code == 401
        assert response.json() == {"error": "incorrect password"}

    def test_unknown_email(self, login):
        response = login(email="nobody@x.com")

        assert response.status_code == 404
        assert response.json() == {"error": "user does not exist"}

    def test_validation_errors(self, client):
        """Bad email and missing password short-circuit with 400."""
        response = client.post("/api/v1/auth/login", json={"email": "nope"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"email", "password"}
