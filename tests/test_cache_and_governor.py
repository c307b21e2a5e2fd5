"""Tests for the cache store and the rate governor."""
from unittest.mock import AsyncMock, patch

import pytest

from app.cache import CacheEntry, CacheStore
from app.ratelimit import RateGovernor


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestCacheStore:
    def test_missing_key(self):
        assert CacheStore().get("/a") is None

    def test_put_stamps_time(self):
        clock = FakeClock(42.0)
        store = CacheStore(ttl_seconds=300, clock=clock)
        entry = store.put("/a", {"data": []})
        assert entry == CacheEntry(key="/a", payload={"data": []}, stored_at=42.0)
        assert store.get("/a") is entry

    def test_entry_expires_at_ttl(self):
        clock = FakeClock()
        store = CacheStore(ttl_seconds=300, clock=clock)
        store.put("/a", "payload")

        clock.now = 299.9
        assert store.get("/a").payload == "payload"
        clock.now = 300.0
        assert store.get("/a") is None

    def test_stale_entries_are_kept(self):
        clock = FakeClock()
        store = CacheStore(ttl_seconds=1, clock=clock)
        store.put("/a", "payload")
        clock.now = 10
        assert store.get("/a") is None
        assert "/a" in store
        assert len(store) == 1

    def test_last_write_wins(self):
        clock = FakeClock()
        store = CacheStore(ttl_seconds=300, clock=clock)
        store.put("/a", "old")
        clock.now = 5
        store.put("/a", "new")
        entry = store.get("/a")
        assert entry.payload == "new"
        assert entry.stored_at == 5

    def test_clear(self):
        store = CacheStore()
        store.put("/a", 1)
        store.clear()
        assert len(store) == 0


class TestRateGovernor:
    @pytest.mark.asyncio
    async def test_first_call_does_not_wait(self):
        governor = RateGovernor(min_interval=1.0, clock=FakeClock(100.0))
        with patch("app.ratelimit.asyncio.sleep", new_callable=AsyncMock) as sleep:
            assert await governor.wait_if_needed() == 0
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_waits_for_remaining_delta(self):
        clock = FakeClock(100.0)
        governor = RateGovernor(min_interval=1.0, clock=clock)
        governor.mark()
        clock.now = 100.25

        with patch("app.ratelimit.asyncio.sleep", new_callable=AsyncMock) as sleep:
            delay = await governor.wait_if_needed()

        assert delay == pytest.approx(0.75)
        sleep.assert_awaited_once()
        assert sleep.await_args.args[0] == pytest.approx(0.75)

    @pytest.mark.asyncio
    async def test_no_wait_after_interval(self):
        clock = FakeClock(100.0)
        governor = RateGovernor(min_interval=1.0, clock=clock)
        governor.mark()
        clock.now = 101.5

        with patch("app.ratelimit.asyncio.sleep", new_callable=AsyncMock) as sleep:
            assert await governor.wait_if_needed() == 0
        sleep.assert_not_called()

    def test_mark_updates_timestamp(self):
        clock = FakeClock(7.0)
        governor = RateGovernor(clock=clock)
        assert governor.last_request_time is None
        governor.mark()
        assert governor.last_request_time == 7.0
