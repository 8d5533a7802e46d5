"""
Application settings.

Values come from environment variables prefixed with ``DEVPULSE_`` (or a
local ``.env`` file), e.g.::

    DEVPULSE_API_BASE_URL=https://dashboard.example.com/api
    DEVPULSE_APP_ENV=production
    DEVPULSE_FALLBACK_POLICY=never
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from devpulse.schemas import FallbackPolicy

#: Cache entries older than this are treated as stale (5 minutes).
CACHE_DURATION_SECONDS = 5 * 60

#: Every network call is abandoned after this many seconds.
REQUEST_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    """Runtime configuration for the data layer."""

    model_config = SettingsConfigDict(
        env_prefix="DEVPULSE_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "devpulse"
    app_env: str = Field(default="development", pattern="^(development|test|production)$")
    debug: bool = False

    api_base_url: str = "http://localhost:5000/api"
    request_timeout: float = Field(default=REQUEST_TIMEOUT_SECONDS, gt=0)

    cache_duration_seconds: float = Field(default=CACHE_DURATION_SECONDS, gt=0)
    cache_max_entries: int = Field(default=512, ge=1)

    fallback_policy: FallbackPolicy = FallbackPolicy.MOCK_OUTSIDE_PROD
    synthetic_seed: int | None = None

    default_period: int = 30

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def allows_mock(self) -> bool:
        """Whether failed fetches may be replaced by synthetic data."""
        return self.fallback_policy.allows_mock(is_production=self.is_production)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once from the environment)."""
    return Settings()
