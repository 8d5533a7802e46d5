"""Static reference data: supported cities and coins."""

from devpulse.reference.cities import (
    DEFAULT_BASE_AQI,
    TECH_HUB_CITIES,
    TechHubCity,
    get_city,
    is_supported_city,
)
from devpulse.reference.coins import (
    CRYPTO_COINS,
    DEFAULT_BASE_PRICE,
    DEFAULT_SUPPLY,
    CryptoCoin,
    get_coin,
    is_supported_coin,
)

__all__ = [
    "CRYPTO_COINS",
    "DEFAULT_BASE_AQI",
    "DEFAULT_BASE_PRICE",
    "DEFAULT_SUPPLY",
    "TECH_HUB_CITIES",
    "CryptoCoin",
    "TechHubCity",
    "get_city",
    "get_coin",
    "is_supported_city",
    "is_supported_coin",
]
