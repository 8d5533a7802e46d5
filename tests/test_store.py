"""Tests for the CacheStore and RequestCoalescer."""

from __future__ import annotations

import asyncio

import pytest

from devpulse.schemas import DataSource
from devpulse.store import CacheEntry, CacheStore, RequestCoalescer


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestCacheStoreInit:
    """Test construction."""

    def test_defaults(self) -> None:
        store = CacheStore()
        assert store.ttl == 300
        assert len(store) == 0

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError, match="max_entries"):
            CacheStore(max_entries=0)


class TestCacheStoreSetGet:
    """Test writing and reading entries."""

    def test_set_returns_entry(self) -> None:
        clock = FakeClock()
        store = CacheStore(clock=clock)
        entry = store.set("github-bangalore-30", [1, 2], DataSource.LIVE)
        assert entry == CacheEntry("github-bangalore-30", [1, 2], 1_000.0, DataSource.LIVE)

    def test_get_missing(self) -> None:
        assert CacheStore().get("nope") is None

    def test_set_replaces_previous_entry(self) -> None:
        clock = FakeClock()
        store = CacheStore(clock=clock)
        store.set("k", "old", DataSource.LIVE)
        clock.advance(10)
        store.set("k", "new", DataSource.MOCK)

        entry = store.get("k")
        assert entry is not None
        assert entry.payload == "new"
        assert entry.source is DataSource.MOCK
        assert entry.timestamp == 1_010.0
        assert len(store) == 1

    def test_entries_are_immutable(self) -> None:
        entry = CacheStore().set("k", 1, DataSource.LIVE)
        with pytest.raises(AttributeError):
            entry.payload = 2  # type: ignore[misc]

    def test_contains(self) -> None:
        store = CacheStore()
        store.set("k", 1, DataSource.LIVE)
        assert "k" in store
        assert "other" not in store


class TestCacheStoreFreshness:
    """Test TTL handling."""

    def test_lookup_within_ttl(self) -> None:
        clock = FakeClock()
        store = CacheStore(ttl=300, clock=clock)
        store.set("k", "v", DataSource.LIVE)
        clock.advance(299.9)
        entry = store.lookup("k")
        assert entry is not None
        assert entry.payload == "v"

    def test_lookup_at_ttl_is_stale(self) -> None:
        clock = FakeClock()
        store = CacheStore(ttl=300, clock=clock)
        store.set("k", "v", DataSource.LIVE)
        clock.advance(300)
        assert store.lookup("k") is None

    def test_stale_entry_still_readable_with_get(self) -> None:
        clock = FakeClock()
        store = CacheStore(ttl=5, clock=clock)
        store.set("k", "v", DataSource.LIVE)
        clock.advance(60)
        entry = store.get("k")
        assert entry is not None
        assert not store.is_valid(entry)

    def test_sweep_removes_only_expired(self) -> None:
        clock = FakeClock()
        store = CacheStore(ttl=10, clock=clock)
        store.set("old", 1, DataSource.LIVE)
        clock.advance(8)
        store.set("new", 2, DataSource.LIVE)
        clock.advance(5)

        assert store.sweep() == 1
        assert "old" not in store
        assert "new" in store

    def test_clear(self) -> None:
        store = CacheStore()
        store.set("a", 1, DataSource.LIVE)
        store.set("b", 2, DataSource.LIVE)
        store.clear()
        assert len(store) == 0


class TestCacheStoreEviction:
    """Test the bounded capacity."""

    def test_evicts_least_recently_used(self) -> None:
        store = CacheStore(max_entries=2, clock=FakeClock())
        store.set("a", 1, DataSource.LIVE)
        store.set("b", 2, DataSource.LIVE)
        store.lookup("a")  # b is now the oldest use
        store.set("c", 3, DataSource.LIVE)

        assert "a" in store
        assert "b" not in store
        assert "c" in store

    def test_sweeps_expired_before_evicting(self) -> None:
        clock = FakeClock()
        store = CacheStore(ttl=10, max_entries=2, clock=clock)
        store.set("stale", 1, DataSource.LIVE)
        clock.advance(5)
        store.set("fresh", 2, DataSource.LIVE)
        store.lookup("stale")
        clock.advance(6)
        store.set("newest", 3, DataSource.LIVE)

        assert "stale" not in store
        assert "fresh" in store
        assert "newest" in store

    def test_replacing_key_does_not_evict(self) -> None:
        store = CacheStore(max_entries=2, clock=FakeClock())
        store.set("a", 1, DataSource.LIVE)
        store.set("b", 2, DataSource.LIVE)
        store.set("a", 3, DataSource.LIVE)
        assert len(store) == 2
        assert "b" in store


class TestRequestCoalescer:
    """Test in-flight de-duplication."""

    def test_concurrent_callers_share_one_call(self) -> None:
        calls = 0

        async def factory() -> str:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return "payload"

        async def scenario() -> list[str]:
            coalescer = RequestCoalescer()
            results = await asyncio.gather(*(coalescer.run("k", factory) for _ in range(5)))
            assert len(coalescer) == 0
            return list(results)

        assert asyncio.run(scenario()) == ["payload"] * 5
        assert calls == 1

    def test_different_keys_run_separately(self) -> None:
        calls: list[str] = []

        def factory_for(key: str):
            async def factory() -> str:
                calls.append(key)
                await asyncio.sleep(0)
                return key

            return factory

        async def scenario() -> list[str]:
            coalescer = RequestCoalescer()
            return list(
                await asyncio.gather(
                    coalescer.run("a", factory_for("a")), coalescer.run("b", factory_for("b"))
                )
            )

        assert asyncio.run(scenario()) == ["a", "b"]
        assert sorted(calls) == ["a", "b"]

    def test_sequential_calls_are_not_coalesced(self) -> None:
        calls = 0

        async def factory() -> int:
            nonlocal calls
            calls += 1
            return calls

        async def scenario() -> tuple[int, int]:
            coalescer = RequestCoalescer()
            first = await coalescer.run("k", factory)
            second = await coalescer.run("k", factory)
            return first, second

        assert asyncio.run(scenario()) == (1, 2)

    def test_cancelling_one_caller_keeps_shared_work(self) -> None:
        async def scenario() -> str:
            coalescer = RequestCoalescer()
            release = asyncio.Event()

            async def factory() -> str:
                await release.wait()
                return "done"

            first = asyncio.ensure_future(coalescer.run("k", factory))
            second = asyncio.ensure_future(coalescer.run("k", factory))
            await asyncio.sleep(0)
            assert "k" in coalescer

            first.cancel()
            await asyncio.sleep(0)
            release.set()
            result = await second
            assert first.cancelled()
            return result

        assert asyncio.run(scenario()) == "done"

    def test_errors_reach_every_caller(self) -> None:
        async def factory() -> str:
            await asyncio.sleep(0)
            raise RuntimeError("boom")

        async def scenario() -> list[object]:
            coalescer = RequestCoalescer()
            return list(
                await asyncio.gather(
                    coalescer.run("k", factory),
                    coalescer.run("k", factory),
                    return_exceptions=True,
                )
            )

        results = asyncio.run(scenario())
        assert all(isinstance(r, RuntimeError) for r in results)
