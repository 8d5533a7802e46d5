"""Dashboard API data models and payload parsing.

The API speaks camelCase JSON (``pullRequests``, ``marketCap``...). Parsers
here normalise each record into a dataclass with a real ``date`` and sort
series oldest first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from devpulse.reference import CryptoCoin, TechHubCity
from devpulse.schemas import ResourceKind

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class GitHubActivity:
    """Developer activity for one day."""

    date: date
    commits: int
    stars: int
    contributors: int
    pull_requests: int = 0
    issues: int = 0
    forks: int = 0
    repositories: int = 0


@dataclass
class AirQualityReading:
    """Daily air quality for a city."""

    date: date
    city: str
    aqi: int
    pm25: float
    station: str | None = None
    lat: float | None = None
    lon: float | None = None


@dataclass
class CryptoPrice:
    """Daily market data for a coin."""

    date: date
    coin_id: str
    price: float
    volume: float
    market_cap: float
    price_change_percentage_24h: float = 0.0


@dataclass
class CorrelationResult:
    """Pairwise correlations between developer activity and an external metric."""

    entity_id: str
    period: int
    correlations: dict[str, float] = field(default_factory=dict)
    confidence: float = 0.0
    data_points: int = 0
    interpretation: str = ""

    @property
    def strongest(self) -> tuple[str, float] | None:
        """The pair with the largest absolute coefficient."""
        if not self.correlations:
            return None
        return max(self.correlations.items(), key=lambda item: abs(item[1]))


def to_dict(record: Any) -> dict[str, Any]:
    """JSON-friendly dict for any model in this module."""
    data = asdict(record)
    if isinstance(data.get("date"), date):
        data["date"] = data["date"].isoformat()
    return data


# =============================================================================
# Parsing
# =============================================================================


def _require_object(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        msg = f"Expected an object for {what}, got {type(raw).__name__}"
        raise TypeError(msg)
    return raw


def _pick(raw: dict[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first present, non-null value among ``names``."""
    _require_object(raw, "record")
    for name in names:
        value = raw.get(name)
        if value is not None:
            return value
    return default


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_github_activity(raw: dict[str, Any]) -> GitHubActivity:
    return GitHubActivity(
        date=_parse_date(raw["date"]),
        commits=int(_pick(raw, "commits", default=0)),
        stars=int(_pick(raw, "stars", default=0)),
        contributors=int(_pick(raw, "contributors", default=0)),
        pull_requests=int(_pick(raw, "pullRequests", "pull_requests", default=0)),
        issues=int(_pick(raw, "issues", default=0)),
        forks=int(_pick(raw, "forks", default=0)),
        repositories=int(_pick(raw, "repositories", default=0)),
    )


def parse_air_quality(raw: dict[str, Any]) -> AirQualityReading:
    coordinates = _require_object(_pick(raw, "coordinates", default={}), "coordinates")
    lat = _pick(coordinates, "lat")
    lon = _pick(coordinates, "lng", "lon")
    return AirQualityReading(
        date=_parse_date(raw["date"]),
        city=str(_pick(raw, "city", default="")),
        aqi=int(raw["aqi"]),
        pm25=float(_pick(raw, "pm25", default=0.0)),
        station=raw.get("station"),
        lat=float(lat) if lat is not None else None,
        lon=float(lon) if lon is not None else None,
    )


def parse_crypto_price(raw: dict[str, Any]) -> CryptoPrice:
    return CryptoPrice(
        date=_parse_date(raw["date"]),
        coin_id=str(_pick(raw, "coinId", "coin", "coin_id", default="")),
        price=float(raw["price"]),
        volume=float(_pick(raw, "volume", default=0.0)),
        market_cap=float(_pick(raw, "marketCap", "market_cap", default=0.0)),
        price_change_percentage_24h=float(
            _pick(raw, "priceChangePercentage24h", "price_change_percentage_24h", default=0.0)
        ),
    )


def _normalise_pair_name(name: str) -> str:
    return name.replace("pullRequests", "pull_requests")


def parse_correlation(raw: dict[str, Any], entity_id: str, period: int) -> CorrelationResult:
    """Parse a correlation payload.

    Missing coefficients (``null``, which is how the API serialises NaN) are
    read as 0.0: no measurable linear relationship.
    """
    pairs = _require_object(_pick(raw, "correlations", default={}), "correlations")
    correlations = {
        _normalise_pair_name(name): float(value) if value is not None else 0.0
        for name, value in pairs.items()
    }
    return CorrelationResult(
        entity_id=str(_pick(raw, "city", "coinId", "coin", default=entity_id)),
        period=int(_pick(raw, "period", default=period)),
        correlations=correlations,
        confidence=float(_pick(raw, "confidence", default=0.0)),
        data_points=int(_pick(raw, "dataPoints", "data_points", default=0)),
        interpretation=str(_pick(raw, "interpretation", default="")),
    )


_SERIES_PARSERS = {
    ResourceKind.GITHUB: parse_github_activity,
    ResourceKind.CRYPTO_GITHUB: parse_github_activity,
    ResourceKind.AIR_QUALITY: parse_air_quality,
    ResourceKind.CRYPTO: parse_crypto_price,
}


def parse_series(kind: ResourceKind, data: Any) -> list[Any]:
    """Parse a list payload for a series resource, oldest point first."""
    if not isinstance(data, list):
        msg = f"Expected a list for {kind}, got {type(data).__name__}"
        raise TypeError(msg)
    parser = _SERIES_PARSERS[kind]
    points = [parser(item) for item in data]
    points.sort(key=lambda p: p.date)
    return points


def parse_payload(kind: ResourceKind, data: Any, entity_id: str, period: int) -> Any:
    """Parse the ``data`` field of an envelope for ``kind``."""
    if kind.is_correlation:
        if not isinstance(data, dict):
            msg = f"Expected an object for {kind}, got {type(data).__name__}"
            raise TypeError(msg)
        return parse_correlation(data, entity_id, period)
    return parse_series(kind, data)


def parse_city(raw: dict[str, Any]) -> TechHubCity:
    coordinates = _require_object(_pick(raw, "coordinates", default={}), "coordinates")
    return TechHubCity(
        id=str(raw["id"]),
        name=str(_pick(raw, "name", default=raw["id"])),
        lat=float(_pick(coordinates, "lat", default=0.0)),
        lon=float(_pick(coordinates, "lng", "lon", default=0.0)),
        country=str(_pick(raw, "country", default="")),
        timezone=str(_pick(raw, "timezone", default="UTC")),
    )


def parse_coin(raw: dict[str, Any]) -> CryptoCoin:
    return CryptoCoin(
        id=str(raw["id"]),
        symbol=str(_pick(raw, "symbol", default="")).upper(),
        name=str(_pick(raw, "name", default=raw["id"])),
        github_repo=str(_pick(raw, "githubRepo", "github_repo", default="")),
    )
