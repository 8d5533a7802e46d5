"""Tests for application settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from devpulse.config import CACHE_DURATION_SECONDS, REQUEST_TIMEOUT_SECONDS, Settings, get_settings
from devpulse.schemas import FallbackPolicy


class TestSettings:
    """Defaults, environment overrides and validation."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.app_env == "development"
        assert settings.cache_duration_seconds == CACHE_DURATION_SECONDS == 300
        assert settings.request_timeout == REQUEST_TIMEOUT_SECONDS == 30
        assert settings.fallback_policy is FallbackPolicy.MOCK_OUTSIDE_PROD
        assert settings.default_period == 30
        assert settings.synthetic_seed is None

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEVPULSE_API_BASE_URL", "https://dash.example.com/api")
        monkeypatch.setenv("DEVPULSE_FALLBACK_POLICY", "never")
        monkeypatch.setenv("DEVPULSE_SYNTHETIC_SEED", "42")
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "https://dash.example.com/api"
        assert settings.fallback_policy is FallbackPolicy.NEVER_MOCK
        assert settings.synthetic_seed == 42

    def test_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("DEVPULSE_APP_ENV=production\n")
        settings = Settings(_env_file=env_file)
        assert settings.is_production

    def test_rejects_unknown_environment(self) -> None:
        with pytest.raises(ValidationError):
            Settings(app_env="staging", _env_file=None)

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            Settings(request_timeout=0, _env_file=None)

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestAllowsMock:
    """Fallback policy resolution."""

    @pytest.mark.parametrize(
        ("policy", "app_env", "expected"),
        [
            (FallbackPolicy.MOCK_OUTSIDE_PROD, "development", True),
            (FallbackPolicy.MOCK_OUTSIDE_PROD, "test", True),
            (FallbackPolicy.MOCK_OUTSIDE_PROD, "production", False),
            (FallbackPolicy.ALWAYS_MOCK, "production", True),
            (FallbackPolicy.NEVER_MOCK, "development", False),
        ],
    )
    def test_policy(self, policy: FallbackPolicy, app_env: str, expected: bool) -> None:
        settings = Settings(fallback_policy=policy, app_env=app_env, _env_file=None)
        assert settings.allows_mock is expected
