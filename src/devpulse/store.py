"""In-memory cache with TTL-based freshness and request coalescing.

Every resource payload is stored under a composite key
(``"{resource}-{entity}-{period}"``) together with the time it was created and
whether it came from the live API or the synthetic generator. Entries are
never updated in place: a new fetch replaces the entry under the same key.

Freshness is decided on read (``now - timestamp < ttl``). The store is bounded:
when it is full, expired entries are swept first and the least recently used
entry is evicted after that.

``RequestCoalescer`` sits next to the store so concurrent callers asking for
the same key share one in-flight request instead of each hitting the API.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from devpulse.config import CACHE_DURATION_SECONDS
from devpulse.schemas import DataSource

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 512


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload. Immutable once written."""

    key: str
    payload: Any
    timestamp: float
    source: DataSource


class CacheStore:
    """Key -> CacheEntry map with a fixed time-to-live."""

    def __init__(
        self,
        ttl: float = CACHE_DURATION_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_entries < 1:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under ``key``, fresh or not."""
        return self._entries.get(key)

    def lookup(self, key: str) -> CacheEntry | None:
        """Return the entry under ``key`` only if it is still valid.

        A hit marks the entry as recently used.
        """
        entry = self._entries.get(key)
        if entry is None or not self.is_valid(entry):
            return None
        self._entries.move_to_end(key)
        return entry

    def set(self, key: str, payload: Any, source: DataSource) -> CacheEntry:
        """Store a new entry under ``key``, replacing any previous one."""
        entry = CacheEntry(key=key, payload=payload, timestamp=self._clock(), source=source)
        self._entries.pop(key, None)
        if len(self._entries) >= self.max_entries:
            self._make_room()
        self._entries[key] = entry
        return entry

    def is_valid(self, entry: CacheEntry) -> bool:
        """True while the entry is younger than the TTL."""
        return self._clock() - entry.timestamp < self.ttl

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        expired = [key for key, entry in self._entries.items() if not self.is_valid(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def _make_room(self) -> None:
        removed = self.sweep()
        if removed:
            logger.debug("Swept %d expired cache entries", removed)
        while len(self._entries) >= self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted least recently used cache entry %s", key)


class RequestCoalescer:
    """Share one in-flight request per key between concurrent callers.

    The first caller for a key starts the work as a task; later callers await
    the same task until it settles. Each caller awaits through
    ``asyncio.shield`` so cancelling one caller never cancels the shared work.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task[Any]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug("Joining in-flight request for %s", key)
        result: T = await asyncio.shield(task)
        return result

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
