"""Tests for the Aggregator."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

from conftest import FakeClient, activity_series

from devpulse.datasources.dashboard_api import CorrelationResult
from devpulse.fetching import AggregateState, Aggregator, DataLayer
from devpulse.schemas import DataSource, FallbackPolicy, ResourceKind

LayerFactory = Callable[..., DataLayer]


class TestComposition:
    """Dashboards are built from named child fetchers."""

    def test_city_dashboard_children(self, make_layer: LayerFactory) -> None:
        dashboard = make_layer().use_city_dashboard("bangalore", 30)
        assert list(dashboard) == ["github", "air_quality", "correlation"]
        assert dashboard.fetcher("air_quality").kind is ResourceKind.AIR_QUALITY
        assert dashboard.fetcher("correlation").key == "correlation-bangalore-30"

    def test_crypto_dashboard_children(self, make_layer: LayerFactory) -> None:
        dashboard = make_layer().use_crypto_dashboard("bitcoin", 14)
        assert len(dashboard) == 3
        assert dashboard.fetcher("github").kind is ResourceKind.CRYPTO_GITHUB
        assert dashboard.fetcher("crypto").key == "crypto-bitcoin-14"
        assert dashboard.fetcher("correlation").kind is ResourceKind.CRYPTO_CORRELATION

    def test_default_period_from_settings(self, make_layer: LayerFactory) -> None:
        dashboard = make_layer().use_city_dashboard("pune")
        assert dashboard.period == 30


class TestLoad:
    """Loading every child."""

    def test_load_settles_every_child(self, make_layer: LayerFactory, client: FakeClient) -> None:
        client.responses[ResourceKind.GITHUB] = activity_series(30)
        dashboard = make_layer().use_city_dashboard("bangalore", 30)

        state = asyncio.run(dashboard.load())
        assert isinstance(state, AggregateState)
        assert not state.is_loading
        assert state.resources["github"].source is DataSource.LIVE
        assert state.resources["air_quality"].source is DataSource.MOCK
        assert isinstance(state.resources["correlation"].data, CorrelationResult)
        assert dashboard["github"].data == state.resources["github"].data

    def test_partial_failure_without_mock(
        self, make_layer: LayerFactory, client: FakeClient
    ) -> None:
        client.responses[ResourceKind.GITHUB] = activity_series(30)
        dashboard = make_layer(policy=FallbackPolicy.NEVER_MOCK).use_city_dashboard("delhi", 30)

        state = asyncio.run(dashboard.load())
        assert state.error["github"] is None
        assert state.error["air_quality"] == "Could not connect to /airquality/delhi/30"
        assert state.error["correlation"]
        assert dashboard.error == state.error

    def test_loading_while_any_child_is_pending(
        self, make_layer: LayerFactory, client: FakeClient
    ) -> None:
        for kind in (ResourceKind.GITHUB, ResourceKind.AIR_QUALITY):
            client.responses[kind] = activity_series(7)
        client.gate = threading.Event()
        layer = make_layer()
        layer.cache.set(
            "correlation-pune-7", CorrelationResult("pune", 7, data_points=7), DataSource.LIVE
        )
        dashboard = layer.use_city_dashboard("pune", 7)

        async def scenario() -> tuple[dict[str, bool], bool, AggregateState]:
            task = asyncio.ensure_future(dashboard.load())
            await asyncio.sleep(0.01)
            during = dashboard.loading
            busy = dashboard.is_loading
            client.gate.set()
            return during, busy, await task

        during, busy, state = asyncio.run(scenario())
        assert during == {"github": True, "air_quality": True, "correlation": False}
        assert busy is True
        assert state.loading == {"github": False, "air_quality": False, "correlation": False}
        assert state.is_loading is False

    def test_idle_before_load(self, make_layer: LayerFactory) -> None:
        dashboard = make_layer().use_crypto_dashboard("solana", 7)
        assert dashboard.is_loading is False
        assert dashboard.state().resources["correlation"].data is None


class TestRefetchAll:
    """refetch_all forces one fresh fetch per child."""

    def test_one_call_per_child_bypassing_cache(
        self, make_layer: LayerFactory, client: FakeClient
    ) -> None:
        layer = make_layer()
        dashboard = layer.use_crypto_dashboard("bitcoin", 30)

        async def scenario() -> None:
            await dashboard.load()
            client.calls.clear()
            await dashboard.load()
            assert client.calls == []
            await dashboard.refetch_all()

        asyncio.run(scenario())
        assert sorted(kind for kind, _, _ in client.calls) == [
            "crypto",
            "crypto/correlation",
            "crypto/github",
        ]


class TestDispose:
    """Disposing an aggregator disposes every child."""

    def test_dispose_all(self, make_layer: LayerFactory) -> None:
        dashboard: Aggregator = make_layer().use_city_dashboard("pune", 7)
        dashboard.dispose()
        assert all(dashboard.fetcher(name).disposed for name in dashboard)
