"""The data layer: one explicitly constructed set of shared services.

Build a ``DataLayer`` once at application start and hand it to whatever needs
data. It owns the cache, the in-flight request map, the API client and the
synthetic generator, and wires them into every fetcher it creates. Tests
build their own isolated instance.

Example::

    layer = DataLayer(get_settings())
    dashboard = layer.use_aggregate("bangalore", 30)
    state = await dashboard.load()
    state.resources["correlation"].data.interpretation
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from devpulse.config import Settings, get_settings
from devpulse.datasources.dashboard_api import DashboardApiClient, DataLayerError
from devpulse.datasources.synthetic import SyntheticSeriesGenerator
from devpulse.fetching.aggregate import Aggregator
from devpulse.fetching.fetcher import FetchOutcome, FetchState, ResourceFetcher
from devpulse.reference import CRYPTO_COINS, TECH_HUB_CITIES, is_supported_coin
from devpulse.schemas import DataSource, ResourceKind
from devpulse.store import CacheStore, RequestCoalescer

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from devpulse.fetching.fetcher import ResourceClient

logger = logging.getLogger(__name__)

CITIES_CACHE_KEY = "cities-all"
COINS_CACHE_KEY = "coins-all"

#: Child fetchers of each dashboard, by name.
CITY_DASHBOARD: dict[str, ResourceKind] = {
    "github": ResourceKind.GITHUB,
    "air_quality": ResourceKind.AIR_QUALITY,
    "correlation": ResourceKind.CORRELATION,
}
CRYPTO_DASHBOARD: dict[str, ResourceKind] = {
    "github": ResourceKind.CRYPTO_GITHUB,
    "crypto": ResourceKind.CRYPTO,
    "correlation": ResourceKind.CRYPTO_CORRELATION,
}


class DataLayer:
    """Shared services plus factories for fetchers and dashboards."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        cache: CacheStore | None = None,
        client: ResourceClient | None = None,
        generator: SyntheticSeriesGenerator | None = None,
        coalescer: RequestCoalescer | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        if cache is None:
            cache = CacheStore(
                ttl=self.settings.cache_duration_seconds,
                max_entries=self.settings.cache_max_entries,
            )
        if client is None:
            client = DashboardApiClient(
                self.settings.api_base_url, timeout=self.settings.request_timeout
            )
        if generator is None:
            generator = SyntheticSeriesGenerator.seeded(self.settings.synthetic_seed)
        self.cache = cache
        self.client = client
        self.generator = generator
        self.coalescer = coalescer if coalescer is not None else RequestCoalescer()

    @property
    def allows_mock(self) -> bool:
        return self.settings.allows_mock

    # -- per-resource --------------------------------------------------------

    def use_resource(
        self, kind: ResourceKind | str, entity_id: str, period: int | None = None
    ) -> ResourceFetcher:
        """A fetcher for one resource of one entity (not loaded yet)."""
        return ResourceFetcher(
            kind,
            entity_id,
            period if period is not None else self.settings.default_period,
            cache=self.cache,
            client=self.client,
            generator=self.generator,
            allows_mock=self.allows_mock,
            coalescer=self.coalescer,
            timeout=self.settings.request_timeout,
        )

    # -- per-entity ----------------------------------------------------------

    def _aggregate(
        self, entity_id: str, period: int | None, layout: dict[str, ResourceKind]
    ) -> Aggregator:
        period = period if period is not None else self.settings.default_period
        fetchers = {
            name: self.use_resource(kind, entity_id, period) for name, kind in layout.items()
        }
        return Aggregator(entity_id, period, fetchers)

    def use_city_dashboard(self, city_id: str, period: int | None = None) -> Aggregator:
        """GitHub activity + air quality + their correlation for a city."""
        return self._aggregate(city_id, period, CITY_DASHBOARD)

    def use_crypto_dashboard(self, coin_id: str, period: int | None = None) -> Aggregator:
        """GitHub activity + prices + their correlation for a coin."""
        return self._aggregate(coin_id, period, CRYPTO_DASHBOARD)

    def use_aggregate(self, entity_id: str, period: int | None = None) -> Aggregator:
        """Crypto dashboard for supported coins, city dashboard otherwise."""
        if is_supported_coin(entity_id):
            return self.use_crypto_dashboard(entity_id, period)
        return self.use_city_dashboard(entity_id, period)

    # -- catalogues ----------------------------------------------------------

    async def list_cities(self, *, force: bool = False) -> FetchState:
        """Supported cities, from the API or the bundled catalogue."""
        state = await self._load_catalog(
            CITIES_CACHE_KEY, self.client.fetch_cities, TECH_HUB_CITIES, force=force
        )
        state.refetch = lambda: self.list_cities(force=True)
        return state

    async def list_coins(self, *, force: bool = False) -> FetchState:
        """Supported coins, from the API or the bundled catalogue."""
        state = await self._load_catalog(
            COINS_CACHE_KEY, self.client.fetch_coins, CRYPTO_COINS, force=force
        )
        state.refetch = lambda: self.list_coins(force=True)
        return state

    async def _load_catalog(
        self,
        key: str,
        fetch: Callable[[], tuple[list[Any], DataSource]],
        bundled: Sequence[Any],
        *,
        force: bool,
    ) -> FetchState:
        if not force:
            entry = self.cache.lookup(key)
            if entry is not None:
                return FetchState(entry.payload, source=entry.source)

        async def acquire() -> FetchOutcome:
            try:
                items, source = await asyncio.wait_for(
                    asyncio.to_thread(fetch), timeout=self.settings.request_timeout
                )
            except TimeoutError:
                return self._recover_catalog(key, bundled, f"Request for {key} timed out")
            except DataLayerError as exc:
                return self._recover_catalog(key, bundled, str(exc))
            self.cache.set(key, items, source)
            return FetchOutcome(items, source)

        outcome = await self.coalescer.run(key, acquire)
        return FetchState(outcome.payload, error=outcome.error, source=outcome.source)

    def _recover_catalog(self, key: str, bundled: Sequence[Any], message: str) -> FetchOutcome:
        if self.allows_mock:
            logger.warning("Fetching %s failed (%s); using bundled catalogue", key, message)
            self.cache.set(key, list(bundled), DataSource.MOCK)
            return FetchOutcome(list(bundled), DataSource.MOCK)
        logger.error("Fetching %s failed: %s", key, message)
        return FetchOutcome([], DataSource.LIVE, message)
