"""Synthetic crypto prices and air quality readings."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from devpulse.datasources.dashboard_api.models import AirQualityReading, CryptoPrice
from devpulse.reference import (
    DEFAULT_BASE_AQI,
    DEFAULT_BASE_PRICE,
    DEFAULT_SUPPLY,
    get_city,
    get_coin,
)

if TYPE_CHECKING:
    import random

# =============================================================================
# Crypto
# =============================================================================

# Random walk: each step moves up to 5% of the base price, slightly up-biased
PRICE_STEP = 0.05
PRICE_DRIFT = 0.48
PRICE_FLOOR = 0.7
PRICE_CEILING = 1.3

# Daily traded volume as a share of market cap
VOLUME_TURNOVER = 0.04


def generate_prices(
    rng: random.Random, end: date, period: int, coin_id: str
) -> list[CryptoPrice]:
    """Bounded random walk around the coin's base price, oldest first.

    Price stays within ``[0.7 * base, 1.3 * base]``. Market cap and volume are
    fixed multiples of price.
    """
    coin = get_coin(coin_id)
    base = coin.base_price if coin else DEFAULT_BASE_PRICE
    supply = coin.circulating_supply if coin else DEFAULT_SUPPLY
    low, high = base * PRICE_FLOOR, base * PRICE_CEILING

    series: list[CryptoPrice] = []
    price = base
    previous: float | None = None
    for offset in range(period - 1, -1, -1):
        step = (rng.random() - PRICE_DRIFT) * base * PRICE_STEP
        price = max(low, min(high, price + step))
        market_cap = price * supply
        change = 0.0 if previous is None else (price - previous) / previous * 100
        series.append(
            CryptoPrice(
                date=end - timedelta(days=offset),
                coin_id=coin_id,
                price=round(price, 6),
                volume=round(market_cap * VOLUME_TURNOVER, 2),
                market_cap=round(market_cap, 2),
                price_change_percentage_24h=round(change, 2),
            )
        )
        previous = price
    return series


# =============================================================================
# Air quality
# =============================================================================

AQI_MAX = 500
AQI_JITTER = 20
PM25_PER_AQI = 0.4
PM25_JITTER = 10


def seasonal_factor(day: date) -> float:
    """Winter air is worse, summer air is better."""
    if day.month in (12, 1, 2):
        return 1.3
    if day.month in (6, 7, 8):
        return 0.8
    return 1.0


def generate_air_quality(
    rng: random.Random, end: date, period: int, city_id: str
) -> list[AirQualityReading]:
    """Daily AQI around the city's baseline, oldest first."""
    city = get_city(city_id)
    base_aqi = city.base_aqi if city else DEFAULT_BASE_AQI
    station = f"{city.name} Central Station" if city else None

    series: list[AirQualityReading] = []
    for offset in range(period - 1, -1, -1):
        day = end - timedelta(days=offset)
        aqi = base_aqi * seasonal_factor(day) + rng.uniform(-AQI_JITTER, AQI_JITTER)
        aqi = max(0, min(AQI_MAX, int(aqi)))
        pm25 = max(0.0, aqi * PM25_PER_AQI + rng.uniform(-PM25_JITTER, PM25_JITTER))
        series.append(
            AirQualityReading(
                date=day,
                city=city_id,
                aqi=aqi,
                pm25=round(pm25, 1),
                station=station,
                lat=city.lat if city else None,
                lon=city.lon if city else None,
            )
        )
    return series
