"""
Shared enums and wire schemas.

The dashboard API wraps every payload in the same envelope::

    {"success": true, "data": [...], "error": null, "source": "live"}

``ApiEnvelope`` validates that shape; the per-resource payloads are parsed
into dataclasses by ``datasources.dashboard_api.models``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

#: Time windows (in days) the API and the generator support.
VALID_PERIODS: tuple[int, ...] = (7, 14, 30, 60, 90)


def validate_period(period: int) -> int:
    """Return ``period`` unchanged, or raise ValueError if it is unsupported."""
    if period not in VALID_PERIODS:
        msg = f"Unsupported period {period!r}; expected one of {VALID_PERIODS}"
        raise ValueError(msg)
    return period


# =============================================================================
# Enums
# =============================================================================


class DataSource(StrEnum):
    """Where a payload came from."""

    LIVE = "live"
    MOCK = "mock"


class ResourceKind(StrEnum):
    """Per-entity resources; the value is the URL path segment."""

    GITHUB = "github"
    AIR_QUALITY = "airquality"
    CORRELATION = "correlation"
    CRYPTO = "crypto"
    CRYPTO_GITHUB = "crypto/github"
    CRYPTO_CORRELATION = "crypto/correlation"

    @property
    def is_correlation(self) -> bool:
        return self in (ResourceKind.CORRELATION, ResourceKind.CRYPTO_CORRELATION)

    @property
    def is_activity(self) -> bool:
        return self in (ResourceKind.GITHUB, ResourceKind.CRYPTO_GITHUB)

    def path(self, entity_id: str, period: int) -> str:
        return f"/{self.value}/{quote(entity_id, safe='')}/{period}"


class FallbackPolicy(StrEnum):
    """When a failed fetch may be replaced by synthetic data."""

    ALWAYS_MOCK = "always"
    NEVER_MOCK = "never"
    MOCK_OUTSIDE_PROD = "outside-production"

    def allows_mock(self, *, is_production: bool) -> bool:
        if self is FallbackPolicy.ALWAYS_MOCK:
            return True
        if self is FallbackPolicy.NEVER_MOCK:
            return False
        return not is_production


def cache_key(kind: ResourceKind | str, entity_id: str, period: int) -> str:
    """Composite cache key: resource kind + entity + period."""
    return f"{kind}-{entity_id}-{period}"


# =============================================================================
# Wire envelope
# =============================================================================


class ApiEnvelope(BaseModel):
    """Response wrapper shared by every dashboard API endpoint."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    data: Any = None
    error: str | None = None
    source: DataSource = Field(default=DataSource.LIVE)
