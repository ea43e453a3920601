"""Fakes for asyncpg pools and connections."""

from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest


class FakeAcquire:
    """Async context manager returned by FakePool.acquire()."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakePool:
    """Stand-in for asyncpg.Pool / RequestDBPool: hands out the same fake connection."""

    def __init__(self, conn):
        self.conn = conn
        self.acquire_count = 0

    def acquire(self):
        self.acquire_count += 1
        return FakeAcquire(self.conn)


@pytest.fixture
def fake_conn():
    """Fake asyncpg connection; configure fetchrow/fetch/fetchval per test."""
    conn = MagicMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=1)
    conn.execute = AsyncMock(return_value="OK")
    return conn


@pytest.fixture
def fake_pool(fake_conn):
    return FakePool(fake_conn)


@pytest.fixture
def request_repo(fake_pool):
    """RequestRepository wired to the fake pool."""
    from leave_api.db.repository_request import RequestRepository

    return RequestRepository(fake_pool)
