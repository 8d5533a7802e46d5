"""Dashboard API client.

Endpoints (relative to the configured base URL):
  - ``GET /cities``                         supported tech hub cities
  - ``GET /crypto/coins``                   supported coins
  - ``GET /{resource}/{entity}/{period}``   per-entity series or correlation

Every response is an ``ApiEnvelope``. ``success=false`` or a missing ``data``
field is a failure regardless of the HTTP status code.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from devpulse.config import REQUEST_TIMEOUT_SECONDS
from devpulse.datasources.dashboard_api.errors import EmptyDataset, NetworkError, UpstreamError
from devpulse.datasources.dashboard_api.models import parse_city, parse_coin, parse_payload
from devpulse.reference import CryptoCoin, TechHubCity
from devpulse.schemas import ApiEnvelope, DataSource, ResourceKind, validate_period
from devpulse.services.http import session as default_session

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"

CITIES_PATH = "/cities"
COINS_PATH = "/crypto/coins"


class DashboardApiClient:
    """Blocking client for the dashboard API.

    Blocking on purpose: the fetch layer runs these calls in a worker thread.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else default_session
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get_envelope(self, path: str) -> ApiEnvelope:
        """GET ``path`` and return a successful envelope.

        Raises:
            NetworkError: Timeout or connection failure.
            UpstreamError: Non-JSON body, malformed envelope, or reported failure.
        """
        url = self.url(path)
        try:
            resp = self.http.get(url, timeout=self.timeout)
        except requests.Timeout as exc:
            msg = f"Request to {path} timed out after {self.timeout:g}s"
            raise NetworkError(msg) from exc
        except requests.ConnectionError as exc:
            msg = f"Could not connect to {url}"
            raise NetworkError(msg) from exc
        except requests.RequestException as exc:
            msg = f"Request to {path} failed: {exc}"
            raise NetworkError(msg) from exc

        try:
            body = resp.json()
        except ValueError as exc:
            msg = f"HTTP {resp.status_code} from {path}: response is not JSON"
            raise UpstreamError(msg) from exc

        try:
            envelope = ApiEnvelope.model_validate(body)
        except ValidationError as exc:
            msg = f"Malformed response envelope from {path}"
            raise UpstreamError(msg) from exc

        if not envelope.success or envelope.data is None:
            msg = envelope.error or f"{path} reported failure (HTTP {resp.status_code})"
            raise UpstreamError(msg)

        return envelope

    def fetch_resource(
        self, kind: ResourceKind, entity_id: str, period: int
    ) -> tuple[Any, DataSource]:
        """Fetch and parse one resource.

        Returns:
            ``(payload, source)``: a list of points oldest first, or a
            ``CorrelationResult`` for correlation resources.

        Raises:
            NetworkError, UpstreamError, EmptyDataset.
        """
        validate_period(period)
        path = kind.path(entity_id, period)
        envelope = self.get_envelope(path)

        try:
            payload = parse_payload(kind, envelope.data, entity_id, period)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            msg = f"Malformed {kind} payload from {path}: {exc}"
            raise UpstreamError(msg) from exc

        if kind.is_correlation:
            if payload.data_points == 0:
                msg = f"No overlapping data points for {entity_id} ({period} days)"
                raise EmptyDataset(msg)
        elif not payload:
            msg = f"No {kind} data for {entity_id} ({period} days)"
            raise EmptyDataset(msg)

        logger.debug("Fetched %s for %s/%s from %s", kind, entity_id, period, envelope.source)
        return payload, envelope.source

    def fetch_cities(self) -> tuple[list[TechHubCity], DataSource]:
        return self._fetch_catalog(CITIES_PATH, parse_city)

    def fetch_coins(self) -> tuple[list[CryptoCoin], DataSource]:
        return self._fetch_catalog(COINS_PATH, parse_coin)

    def _fetch_catalog(self, path: str, parser: Any) -> tuple[list[Any], DataSource]:
        envelope = self.get_envelope(path)
        if not isinstance(envelope.data, list):
            msg = f"Expected a list from {path}"
            raise UpstreamError(msg)
        try:
            items = [parser(item) for item in envelope.data]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            msg = f"Malformed catalogue entry from {path}: {exc}"
            raise UpstreamError(msg) from exc
        if not items:
            msg = f"{path} returned no entries"
            raise EmptyDataset(msg)
        return items, envelope.source
