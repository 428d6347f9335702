import asyncpg
import pytest
from fastapi.testclient import TestClient

from core.bootstrap import SEED_USERS
from core.db import get_database
from main import app


class FakeDatabase:
    """In-memory stand-in for `core.db.Database`.

    Keeps rows in insertion order and raises the same asyncpg errors the
    real `users` table would for a primary-key collision.
    """

    def __init__(self, rows=None):
        self.rows = dict(rows or {})
        self.calls = []
        self.fail_with = None

    def _record(self, sql, args):
        self.calls.append((" ".join(sql.split()), args))
        if self.fail_with is not None:
            raise self.fail_with

    async def fetch_all(self, sql, *args):
        self._record(sql, args)
        return [{"uuid": uuid, "name": name} for uuid, name in self.rows.items()]

    async def fetch_one(self, sql, *args):
        rows = await self.fetch_all(sql, *args)
        return rows[0] if rows else None

    async def execute(self, sql, *args):
        self._record(sql, args)
        uuid, name = args
        if uuid in self.rows:
            raise asyncpg.UniqueViolationError(
                'duplicate key value violates unique constraint "users_pkey"'
            )
        self.rows[uuid] = name


@pytest.fixture(name="database")
def database_fixture():
    """A store pre-loaded with the seed users, like a freshly bootstrapped DB."""
    return FakeDatabase(dict(SEED_USERS))


@pytest.fixture(name="client")
def client_fixture(database: FakeDatabase):
    """Test client wired to the fake store.

    Not entered as a context manager, so the lifespan (bootstrap + real pool)
    never runs.
    """
    app.dependency_overrides[get_database] = lambda: database
    yield TestClient(app)
    app.dependency_overrides.clear()
