"""Dashboard API data source.

Fetches developer activity, air quality, crypto prices and precomputed
correlations from the dashboard backend.

Public API:
  - client: DashboardApiClient (envelope validation, error mapping)
  - models: GitHubActivity, AirQualityReading, CryptoPrice, CorrelationResult
  - errors: DataLayerError, NetworkError, UpstreamError, EmptyDataset
"""

from devpulse.datasources.dashboard_api.client import (
    CITIES_PATH,
    COINS_PATH,
    DEFAULT_BASE_URL,
    DashboardApiClient,
)
from devpulse.datasources.dashboard_api.errors import (
    DataLayerError,
    EmptyDataset,
    NetworkError,
    UpstreamError,
)
from devpulse.datasources.dashboard_api.models import (
    AirQualityReading,
    CorrelationResult,
    CryptoPrice,
    GitHubActivity,
    parse_payload,
    to_dict,
)

__all__ = [
    "CITIES_PATH",
    "COINS_PATH",
    "DEFAULT_BASE_URL",
    "AirQualityReading",
    "CorrelationResult",
    "CryptoPrice",
    "DashboardApiClient",
    "DataLayerError",
    "EmptyDataset",
    "GitHubActivity",
    "NetworkError",
    "UpstreamError",
    "parse_payload",
    "to_dict",
]
