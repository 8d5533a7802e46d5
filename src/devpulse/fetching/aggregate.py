"""Compose several resource fetchers for one entity.

The aggregator holds no state of its own: every view is computed from the
children, which load independently. Partial completion is normal: whichever
children have settled show their data while the rest still report
``loading``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from devpulse.fetching.fetcher import FetchState, ResourceFetcher


@dataclass
class AggregateState:
    """Combined snapshot of every child fetcher."""

    entity_id: str
    period: int
    resources: dict[str, FetchState] = field(default_factory=dict)
    loading: dict[str, bool] = field(default_factory=dict)
    error: dict[str, str | None] = field(default_factory=dict)

    @property
    def is_loading(self) -> bool:
        return any(self.loading.values())


class Aggregator:
    """Named child fetchers for one entity and period."""

    def __init__(
        self, entity_id: str, period: int, fetchers: Mapping[str, ResourceFetcher]
    ) -> None:
        self.entity_id = entity_id
        self.period = period
        self._fetchers = dict(fetchers)

    def __getitem__(self, name: str) -> FetchState:
        return self._fetchers[name].state

    def __iter__(self) -> Iterator[str]:
        return iter(self._fetchers)

    def __len__(self) -> int:
        return len(self._fetchers)

    def fetcher(self, name: str) -> ResourceFetcher:
        return self._fetchers[name]

    @property
    def loading(self) -> dict[str, bool]:
        return {name: f.loading for name, f in self._fetchers.items()}

    @property
    def is_loading(self) -> bool:
        return any(f.loading for f in self._fetchers.values())

    @property
    def error(self) -> dict[str, str | None]:
        return {name: f.error for name, f in self._fetchers.items()}

    def state(self) -> AggregateState:
        return AggregateState(
            entity_id=self.entity_id,
            period=self.period,
            resources={name: f.state for name, f in self._fetchers.items()},
            loading=self.loading,
            error=self.error,
        )

    async def load(self) -> AggregateState:
        """Load every child concurrently; returns once all have settled."""
        await asyncio.gather(*(f.load() for f in self._fetchers.values()))
        return self.state()

    async def refetch_all(self) -> AggregateState:
        """Refetch every child once, bypassing their cached entries."""
        await asyncio.gather(*(f.refetch() for f in self._fetchers.values()))
        return self.state()

    def dispose(self) -> None:
        for f in self._fetchers.values():
            f.dispose()
