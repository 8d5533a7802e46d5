"""Stand-in data for when the dashboard API is unavailable."""

from __future__ import annotations

import random
from datetime import date
from typing import TYPE_CHECKING, Any

from devpulse.analysis.correlation import (
    correlate_activity_with_air_quality,
    correlate_activity_with_prices,
)
from devpulse.datasources.synthetic.activity import generate_activity
from devpulse.datasources.synthetic.markets import generate_air_quality, generate_prices
from devpulse.schemas import ResourceKind, validate_period

if TYPE_CHECKING:
    from collections.abc import Callable

    from devpulse.datasources.dashboard_api.models import (
        AirQualityReading,
        CorrelationResult,
        CryptoPrice,
        GitHubActivity,
    )


class SyntheticSeriesGenerator:
    """Plausible daily series ending today, one point per day, oldest first.

    Pass a seeded ``random.Random`` for reproducible output; the default is
    unseeded, so two calls with the same arguments differ.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self._today = today

    @classmethod
    def seeded(cls, seed: int | None) -> SyntheticSeriesGenerator:
        return cls(random.Random(seed) if seed is not None else None)

    def github_activity(self, period: int) -> list[GitHubActivity]:
        return generate_activity(self.rng, self._today(), validate_period(period))

    def crypto_prices(self, coin_id: str, period: int) -> list[CryptoPrice]:
        return generate_prices(self.rng, self._today(), validate_period(period), coin_id)

    def air_quality(self, city_id: str, period: int) -> list[AirQualityReading]:
        return generate_air_quality(self.rng, self._today(), validate_period(period), city_id)

    def city_correlation(self, city_id: str, period: int) -> CorrelationResult:
        activity = self.github_activity(period)
        readings = self.air_quality(city_id, period)
        return correlate_activity_with_air_quality(city_id, period, activity, readings)

    def crypto_correlation(self, coin_id: str, period: int) -> CorrelationResult:
        activity = self.github_activity(period)
        prices = self.crypto_prices(coin_id, period)
        return correlate_activity_with_prices(coin_id, period, activity, prices)

    def for_resource(self, kind: ResourceKind | str, entity_id: str, period: int) -> Any:
        """Synthetic payload shaped like the live payload for ``kind``."""
        kind = ResourceKind(kind)
        if kind.is_activity:
            return self.github_activity(period)
        if kind is ResourceKind.AIR_QUALITY:
            return self.air_quality(entity_id, period)
        if kind is ResourceKind.CRYPTO:
            return self.crypto_prices(entity_id, period)
        if kind is ResourceKind.CORRELATION:
            return self.city_correlation(entity_id, period)
        return self.crypto_correlation(entity_id, period)
