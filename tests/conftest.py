# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces the Mongo-backed UserStore with an in-memory fake that keeps
#   the same unique-index and atomic-increment behaviour
# - Provides a TestClient and helpers for authenticated requests
# =============================================================================

import os
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB_NAME", "devtree_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("PROFILE_BASE_URL", "https://devtree.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from lib.database import DuplicateKeyViolation, UserStore


# =============================================================================
# In-memory store
# =============================================================================

class FakeUserStore:
    """Dict-backed stand-in for UserStore with unique email/handle."""

    UNIQUE_FIELDS = ("email", "handle")

    def __init__(self):
        self.users: dict[str, dict] = {}

    def _check_unique(self, data: dict, exclude_id: str | None = None) -> None:
        for field in self.UNIQUE_FIELDS:
            if field not in data:
                continue
            for user_id, user in self.users.items():
                if user_id != exclude_id and user[field] == data[field]:
                    raise DuplicateKeyViolation(field)

    async def find_user(self, filters: dict) -> dict | None:
        for user in self.users.values():
            if all(user.get(key) == value for key, value in filters.items()):
                return dict(user)
        return None

    async def get_user(self, user_id: str, include_password: bool = True) -> dict | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        user = dict(user)
        if not include_password:
            user.pop("password", None)
        return user

    async def insert_user(self, data: dict) -> dict:
        record = {
            "handle": data["handle"].strip().lower(),
            "name": data["name"].strip(),
            "email": data["email"].strip().lower(),
            "password": data["password"],
            "description": data.get("description", ""),
            "image": data.get("image", ""),
            "links": data.get("links", "[]"),
            "qr_code": data.get("qr_code", ""),
            "visits": data.get("visits", 0),
        }
        self._check_unique(record)
        record["id"] = uuid4().hex[:24]
        self.users[record["id"]] = record
        return dict(record)

    async def update_user(self, user_id: str, fields: dict) -> dict | None:
        if user_id not in self.users:
            return None
        self._check_unique(fields, exclude_id=user_id)
        self.users[user_id].update(fields)
        return dict(self.users[user_id])

    async def increment_visits(self, handle: str) -> dict | None:
        for user in self.users.values():
            if user["handle"] == handle:
                user["visits"] += 1
                return dict(user)
        return None

    def by_handle(self, handle: str) -> dict | None:
        """Synchronous lookup for assertions."""
        for user in self.users.values():
            if user["handle"] == handle:
                return user
        return None


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store(monkeypatch):
    """Swap UserStore's methods for an in-memory fake."""
    fake = FakeUserStore()
    for name in ("find_user", "get_user", "insert_user", "update_user", "increment_visits"):
        monkeypatch.setattr(UserStore, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(store):
    """TestClient without lifespan, so no MongoDB connection is made."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def register(client):
    """Register an account and return the response."""

    def _register(
        email: str = "a@x.com",
        password: str = "p1",
        handle: str = "Alice!",
        name: str = "Alice",
    ):
        return client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "handle": handle, "name": name},
        )

    return _register


@pytest.fixture
def login(client):
    """Log in and return the response."""

    def _login(email: str = "a@x.com", password: str = "p1"):
        return client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
        )

    return _login


@pytest.fixture
def auth_headers(register, login):
    """Register the default user and return bearer headers for them."""

    def _auth_headers(email: str = "a@x.com", password: str = "p1", handle: str = "Alice!"):
        register(email=email, password=password, handle=handle)
        token = login(email=email, password=password).text
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
