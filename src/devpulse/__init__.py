"""devpulse - developer activity vs. air quality and crypto prices.

Architecture::

    datasources/   Dashboard API client + synthetic stand-in series
    store.py       In-memory TTL cache and in-flight request coalescing
    analysis/      Cross-series logic (Pearson correlation, interpretation)
    fetching/      Per-resource fetchers, per-entity aggregators, DataLayer
    flows/         Prefect orchestration (dashboard snapshots)
    services/      Shared utilities (HTTP client with retry)

Data flow: fetching → store (cache) → datasources (API, else synthetic) → analysis

Extension points and dependency rules live in each package docstring:
  - New resource kind:  datasources/__init__.py
  - New analysis:       analysis/__init__.py
"""

__version__ = "0.1.0"
__author__ = "DevPulse Contributors"

from devpulse.config import Settings

__all__ = ["Settings", "__version__"]
