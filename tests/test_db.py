"""
Tests for the shared Prisma client lifecycle (with a mocked client).

Validates:
- A healthy cached client is handed out without a health-check round trip
- Concurrent catalog lookups neither wait on the lock nor on each other
- Health checks run after the check interval or after a failed query
- A dead client is replaced once, even with concurrent callers
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from unx_mcp import db
from unx_mcp.repository import PrismaCourseRepository


def _fake_client():
    client = MagicMock()
    client.query_raw = AsyncMock(return_value=[{"?column?": 1}])
    client.disconnect = AsyncMock()
    return client


@pytest.fixture
def create_client(monkeypatch):
    """Replace the real connect step; each call yields a new fake client."""
    factory = AsyncMock(side_effect=lambda: _fake_client())
    monkeypatch.setattr(db, "_create_client", factory)
    monkeypatch.setattr(db, "_client", None)
    monkeypatch.setattr(db, "_verified_at", 0.0)
    monkeypatch.setattr(db, "_lock", asyncio.Lock())
    return factory


class TestGetDb:
    async def test_first_call_connects(self, create_client):
        client = await db.get_db()

        assert create_client.await_count == 1
        assert db._client is client

    async def test_cached_client_is_not_rechecked(self, create_client):
        client = await db.get_db()

        for _ in range(5):
            assert await db.get_db() is client

        client.query_raw.assert_not_awaited()
        assert create_client.await_count == 1

    async def test_health_check_after_interval(self, create_client):
        client = await db.get_db()
        db._verified_at = time.monotonic() - db.HEALTH_CHECK_INTERVAL_SECONDS - 1

        assert await db.get_db() is client

        client.query_raw.assert_awaited_once_with("SELECT 1")
        assert db._is_fresh()

    async def test_mark_stale_forces_health_check(self, create_client):
        client = await db.get_db()

        db.mark_stale()
        await db.get_db()

        client.query_raw.assert_awaited_once()

    async def test_dead_client_is_replaced(self, create_client):
        old = await db.get_db()
        old.query_raw.side_effect = ConnectionError("server closed the connection")
        db.mark_stale()

        new = await db.get_db()

        assert new is not old
        old.disconnect.assert_awaited_once()
        assert create_client.await_count == 2

    async def test_concurrent_callers_reconnect_once(self, create_client):
        old = await db.get_db()
        old.query_raw.side_effect = ConnectionError("gone")
        db.mark_stale()

        clients = await asyncio.gather(*(db.get_db() for _ in range(5)))

        assert len({id(c) for c in clients}) == 1
        assert create_client.await_count == 2

    async def test_close_db(self, create_client):
        client = await db.get_db()

        await db.close_db()

        client.disconnect.assert_awaited_once()
        assert db._client is None


class TestConcurrentLookups:
    async def test_detail_lookups_do_not_serialize(self, create_client):
        client = await db.get_db()
        in_flight = 0
        peak = 0

        async def slow_lookup(**kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.05)
            in_flight -= 1

        for model in ("pricing", "coursesession", "coursemedia"):
            getattr(client, model).find_first = AsyncMock(side_effect=slow_lookup)

        repository = PrismaCourseRepository(db.get_db, on_failure=db.mark_stale)

        # Holding the lock proves the lookups never take it
        async with db._lock:
            await asyncio.wait_for(
                asyncio.gather(
                    repository.find_pricing("C-INT", "2025-2"),
                    repository.find_session("C-INT", "2025-2"),
                    repository.find_media("C-INT", "main_image"),
                ),
                timeout=1.0,
            )

        assert peak == 3
        client.query_raw.assert_not_awaited()

    async def test_failed_query_marks_connection_stale(self, create_client):
        client = await db.get_db()
        client.pricing.find_first = AsyncMock(side_effect=ConnectionError("reset"))
        repository = PrismaCourseRepository(db.get_db, on_failure=db.mark_stale)

        with pytest.raises(ConnectionError):
            await repository.find_pricing("C-INT", "2025-2")

        assert not db._is_fresh()
        await db.get_db()
        client.query_raw.assert_awaited_once_with("SELECT 1")
