"""Per-resource fetch state.

A ``ResourceFetcher`` owns the visible state for one ``(kind, entity, period)``
and runs this protocol on every ``load()``:

1. A valid cache entry is returned immediately: no network call and no
   loading transition.
2. Otherwise ``loading`` flips on and the API is called in a worker thread,
   bounded by the request timeout. Concurrent fetchers for the same key share
   one in-flight call through the ``RequestCoalescer``.
3. Success is cached with the envelope's source tag.
4. Failure goes through the fallback policy: synthetic data tagged ``mock``
   (cached, no error), or an error message with empty data (nothing cached).

``refetch()`` repeats the protocol without the cache shortcut. ``dispose()``
ties the fetcher to its caller's lifetime: pending work is cancelled for this
fetcher and its state is frozen.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from devpulse.analysis.correlation import MetricFamily, ensure_interpretation
from devpulse.config import REQUEST_TIMEOUT_SECONDS
from devpulse.datasources.dashboard_api.errors import DataLayerError, NetworkError
from devpulse.schemas import DataSource, ResourceKind, cache_key, validate_period
from devpulse.store import RequestCoalescer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from devpulse.datasources.synthetic import SyntheticSeriesGenerator
    from devpulse.store import CacheStore

logger = logging.getLogger(__name__)

_CORRELATION_FAMILIES = {
    ResourceKind.CORRELATION: MetricFamily.AIR_QUALITY,
    ResourceKind.CRYPTO_CORRELATION: MetricFamily.CRYPTO,
}


class ResourceClient(Protocol):
    """What a fetcher needs from the API client."""

    def fetch_resource(
        self, kind: ResourceKind, entity_id: str, period: int
    ) -> tuple[Any, DataSource]: ...

    def fetch_cities(self) -> tuple[list[Any], DataSource]: ...

    def fetch_coins(self) -> tuple[list[Any], DataSource]: ...


@dataclass
class FetchState:
    """Snapshot of a fetcher, as seen by the UI layer."""

    data: Any
    loading: bool = False
    error: str | None = None
    source: DataSource = DataSource.LIVE
    refetch: Callable[[], Awaitable[FetchState]] | None = field(
        default=None, repr=False, compare=False
    )


@dataclass(frozen=True)
class FetchOutcome:
    """Settled result of one acquisition, shared by coalesced callers."""

    payload: Any
    source: DataSource
    error: str | None = None


def empty_payload(kind: ResourceKind) -> Any:
    return None if kind.is_correlation else []


class ResourceFetcher:
    """Fetch, cache and (policy permitting) fake one resource for one entity."""

    def __init__(
        self,
        kind: ResourceKind | str,
        entity_id: str,
        period: int,
        *,
        cache: CacheStore,
        client: ResourceClient,
        generator: SyntheticSeriesGenerator,
        allows_mock: bool,
        coalescer: RequestCoalescer | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.kind = ResourceKind(kind)
        self.entity_id = entity_id
        self.period = validate_period(period)
        self.key = cache_key(self.kind, entity_id, period)
        self.allows_mock = allows_mock
        self.timeout = timeout

        self._cache = cache
        self._client = client
        self._generator = generator
        self._coalescer = coalescer if coalescer is not None else RequestCoalescer()

        self._data: Any = empty_payload(self.kind)
        self._loading = False
        self._error: str | None = None
        self._source = DataSource.LIVE
        self._disposed = False
        self._pending: set[asyncio.Future[FetchOutcome]] = set()

    def __repr__(self) -> str:
        return f"ResourceFetcher({self.key!r}, loading={self._loading}, source={self._source})"

    # -- visible state -------------------------------------------------------

    @property
    def data(self) -> Any:
        return self._data

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def source(self) -> DataSource:
        return self._source

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def state(self) -> FetchState:
        return FetchState(
            data=self._data,
            loading=self._loading,
            error=self._error,
            source=self._source,
            refetch=self.refetch,
        )

    # -- protocol ------------------------------------------------------------

    async def load(self, *, force: bool = False) -> FetchState:
        """Bring the state up to date and return a snapshot of it."""
        if self._disposed:
            return self.state

        if not force:
            entry = self._cache.lookup(self.key)
            if entry is not None:
                logger.debug("Cache hit for %s (%s)", self.key, entry.source)
                self._apply(FetchOutcome(entry.payload, entry.source))
                return self.state

        self._loading = True
        self._error = None
        pending = asyncio.ensure_future(self._coalescer.run(self.key, self._acquire))
        self._pending.add(pending)
        try:
            outcome = await pending
        except asyncio.CancelledError:
            if self._disposed and pending.cancelled():
                return self.state
            self._loading = False
            raise
        except Exception:
            self._loading = False
            raise
        finally:
            self._pending.discard(pending)

        if not self._disposed:
            self._apply(outcome)
        return self.state

    async def refetch(self) -> FetchState:
        """Fetch again, ignoring any cached entry."""
        return await self.load(force=True)

    def dispose(self) -> None:
        """Stop updating state; cancel this fetcher's pending wait."""
        self._disposed = True
        for pending in list(self._pending):
            pending.cancel()

    # -- internals -----------------------------------------------------------

    def _apply(self, outcome: FetchOutcome) -> None:
        self._data = outcome.payload
        self._source = outcome.source
        self._error = outcome.error
        self._loading = False

    async def _acquire(self) -> FetchOutcome:
        try:
            payload, source = await asyncio.wait_for(
                asyncio.to_thread(
                    self._client.fetch_resource, self.kind, self.entity_id, self.period
                ),
                timeout=self.timeout,
            )
        except TimeoutError:
            msg = f"Request to {self.kind.path(self.entity_id, self.period)} timed out"
            msg += f" after {self.timeout:g}s"
            return self._recover(NetworkError(msg))
        except DataLayerError as exc:
            return self._recover(exc)

        family = _CORRELATION_FAMILIES.get(self.kind)
        if family is not None:
            payload = ensure_interpretation(payload, family)
        self._cache.set(self.key, payload, source)
        return FetchOutcome(payload, source)

    def _recover(self, exc: DataLayerError) -> FetchOutcome:
        if self.allows_mock:
            logger.warning("Fetching %s failed (%s); using synthetic data", self.key, exc)
            payload = self._generator.for_resource(self.kind, self.entity_id, self.period)
            self._cache.set(self.key, payload, DataSource.MOCK)
            return FetchOutcome(payload, DataSource.MOCK)

        logger.error("Fetching %s failed: %s", self.key, exc)
        return FetchOutcome(empty_payload(self.kind), DataSource.LIVE, str(exc))
