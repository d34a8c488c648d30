"""Shared test fixtures.

The app talks to Supabase and Redis; tests swap both for small in-memory
stand-ins so the suite runs offline.
"""

import os
import time
import uuid
from datetime import datetime, timezone

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-0123456789abcdef")

import bcrypt
import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from anyhire.auth.dependencies import get_token_store
from anyhire.auth.token_store import RefreshTokenStore
from anyhire.chat.service import ChatRelay, get_chat_relay
from anyhire.main import app
from anyhire.realtime.rooms import RoomRegistry


# --- In-memory Supabase ---

class _Result:
    def __init__(self, data):
        self.data = data


class _Query:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._rows = db.tables.setdefault(table, [])
        self._op = "select"
        self._payload = None
        self._filters: list[tuple[str, object]] = []
        self._order: tuple[str, bool] | None = None

    def select(self, columns="*", count=None):
        self._op = "select"
        return self

    def insert(self, row):
        self._op, self._payload = "insert", row
        return self

    def update(self, data):
        self._op, self._payload = "update", data
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self):
        if self._db.delay:
            time.sleep(self._db.delay)
        if self._op != "select" and self._db.fail_writes:
            raise RuntimeError("database unavailable")

        if self._op == "insert":
            now = datetime.now(timezone.utc).isoformat()
            row = {"id": uuid.uuid4().hex, "created_at": now, "updated_at": now, **self._payload}
            self._rows.append(row)
            return _Result([dict(row)])

        matched = [row for row in self._rows if self._matches(row)]
        if self._op == "update":
            for row in matched:
                row.update(self._payload)
        elif self._op == "delete":
            for row in matched:
                self._rows.remove(row)
        elif self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        return _Result([dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.fail_writes = False
        # Seconds each query blocks, like a network round-trip.
        self.delay = 0.0

    def table(self, name: str) -> _Query:
        return _Query(self, name)


# --- In-memory Redis ---

class FakeRedis:
    def __init__(self):
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def ping(self):
        return True

    async def set(self, key, value, ex=None):
        self.values[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def get(self, key):
        return self.values.get(key)

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += key in self.values
            self.values.pop(key, None)
            self.ttls.pop(key, None)
        return removed


class BrokenRedis:
    async def set(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    async def delete(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")


class FakeSocket:
    """Records frames a connection would have sent."""

    def __init__(self):
        self.sent: list[dict] = []

    async def send_json(self, data):
        self.sent.append(data)

    def events(self, event_type: str) -> list[dict]:
        return [frame["payload"] for frame in self.sent if frame["type"] == event_type]


# --- Fixtures ---

@pytest.fixture
def db(monkeypatch):
    fake = FakeSupabase()
    monkeypatch.setattr("anyhire.users.repository.get_supabase", lambda: fake)
    monkeypatch.setattr("anyhire.chat.repository.get_supabase", lambda: fake)
    return fake


@pytest.fixture
def redis_client():
    return FakeRedis()


@pytest.fixture
def token_store(redis_client):
    return RefreshTokenStore(redis_client)


@pytest.fixture
def rooms():
    return RoomRegistry()


@pytest.fixture
def relay(rooms):
    return ChatRelay(rooms)


@pytest.fixture
def client(db, token_store, relay):
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_chat_relay] = lambda: relay
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    """Extra clients with their own cookie jars, sharing the same overrides."""
    return lambda: TestClient(app)


@pytest.fixture
def seed_user(db):
    def _seed(email="a@x.com", password="correct", name="Alice", role="customer") -> dict:
        row = {
            "id": uuid.uuid4().hex,
            "email": email,
            "name": name,
            "role": role,
            "image": None,
            "password_hash": bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode(),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        db.tables.setdefault("users", []).append(row)
        return row

    return _seed


@pytest.fixture
def login():
    def _login(client, email="a@x.com", password="correct"):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["data"]

    return _login
