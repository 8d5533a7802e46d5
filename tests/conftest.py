"""Shared fixtures: a scripted API client, a manual clock and a data layer."""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

import pytest

from devpulse.config import Settings
from devpulse.datasources.dashboard_api import GitHubActivity, NetworkError
from devpulse.datasources.synthetic import SyntheticSeriesGenerator
from devpulse.fetching import DataLayer
from devpulse.schemas import DataSource, FallbackPolicy, ResourceKind
from devpulse.store import CacheStore

TODAY = date(2025, 1, 15)


def activity_series(period: int, end: date = TODAY) -> list[GitHubActivity]:
    return [
        GitHubActivity(
            date=end - timedelta(days=offset), commits=100 + offset, stars=10, contributors=5
        )
        for offset in range(period - 1, -1, -1)
    ]


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClient:
    """Scripted stand-in for DashboardApiClient.

    ``responses`` maps a resource kind to a payload or an exception to raise.
    Kinds without a response fail with ``NetworkError``. Set ``gate`` to hold
    every call until the event is set.
    """

    def __init__(self) -> None:
        self.responses: dict[ResourceKind, Any] = {}
        self.source = DataSource.LIVE
        self.catalogue: dict[str, Any] = {}
        self.calls: list[tuple[str, str, int]] = []
        self.gate: threading.Event | None = None
        self.delay = 0.0

    def _wait(self) -> None:
        if self.delay:
            time.sleep(self.delay)
        if self.gate is not None:
            self.gate.wait(timeout=5)

    def fetch_resource(
        self, kind: ResourceKind, entity_id: str, period: int
    ) -> tuple[Any, DataSource]:
        self.calls.append((str(kind), entity_id, period))
        self._wait()
        response = self.responses.get(kind)
        if response is None:
            msg = f"Could not connect to /{kind}/{entity_id}/{period}"
            raise NetworkError(msg)
        if isinstance(response, Exception):
            raise response
        return response, self.source

    def _catalogue(self, name: str) -> tuple[list[Any], DataSource]:
        self.calls.append((name, "", 0))
        self._wait()
        response = self.catalogue.get(name)
        if response is None:
            msg = f"Could not connect to /{name}"
            raise NetworkError(msg)
        if isinstance(response, Exception):
            raise response
        return response, self.source

    def fetch_cities(self) -> tuple[list[Any], DataSource]:
        return self._catalogue("cities")

    def fetch_coins(self) -> tuple[list[Any], DataSource]:
        return self._catalogue("coins")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def make_layer(client: FakeClient, clock: FakeClock) -> Callable[..., DataLayer]:
    """Build an isolated DataLayer around the fake client and clock."""

    def _make(
        policy: FallbackPolicy = FallbackPolicy.MOCK_OUTSIDE_PROD,
        app_env: str = "development",
        request_timeout: float = 30.0,
    ) -> DataLayer:
        settings = Settings(
            app_env=app_env,
            fallback_policy=policy,
            request_timeout=request_timeout,
            _env_file=None,
        )
        return DataLayer(
            settings,
            cache=CacheStore(ttl=settings.cache_duration_seconds, clock=clock),
            client=client,
            generator=SyntheticSeriesGenerator(random.Random(0), today=lambda: TODAY),
        )

    return _make

