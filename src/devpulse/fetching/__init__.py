"""Cached, fallback-aware data acquisition.

    DataLayer ── use_resource ──> ResourceFetcher ──> CacheStore
        │                              │          ──> DashboardApiClient
        └─ use_aggregate ──> Aggregator ┘          ──> SyntheticSeriesGenerator

Every fetcher exposes ``FetchState(data, loading, error, source, refetch)``;
an aggregator combines its children's loading and error maps and adds
``refetch_all()``.
"""

from devpulse.fetching.aggregate import AggregateState, Aggregator
from devpulse.fetching.fetcher import FetchOutcome, FetchState, ResourceFetcher, empty_payload
from devpulse.fetching.layer import CITY_DASHBOARD, CRYPTO_DASHBOARD, DataLayer

__all__ = [
    "CITY_DASHBOARD",
    "CRYPTO_DASHBOARD",
    "AggregateState",
    "Aggregator",
    "DataLayer",
    "FetchOutcome",
    "FetchState",
    "ResourceFetcher",
    "empty_payload",
]
