"""Cryptocurrencies tracked by the crypto dashboard.

Base prices and circulating supplies are rough reference values used only by
the synthetic generator; live prices always come from the API.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_BASE_PRICE = 100.0
DEFAULT_SUPPLY = 50_000_000.0


@dataclass(frozen=True)
class CryptoCoin:
    """A supported coin and the repository its developer activity comes from."""

    id: str
    symbol: str
    name: str
    github_repo: str
    base_price: float = DEFAULT_BASE_PRICE
    circulating_supply: float = DEFAULT_SUPPLY

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


CRYPTO_COINS: tuple[CryptoCoin, ...] = (
    CryptoCoin("bitcoin", "BTC", "Bitcoin", "bitcoin/bitcoin", 95_000.0, 19_500_000),
    CryptoCoin("ethereum", "ETH", "Ethereum", "ethereum/go-ethereum", 3_500.0, 120_000_000),
    CryptoCoin("solana", "SOL", "Solana", "solana-labs/solana", 180.0, 430_000_000),
    CryptoCoin("cardano", "ADA", "Cardano", "IntersectMBO/cardano-node", 0.95, 35_000_000_000),
    CryptoCoin("dogecoin", "DOGE", "Dogecoin", "dogecoin/dogecoin", 0.35, 146_000_000_000),
    CryptoCoin("ripple", "XRP", "XRP", "XRPLF/rippled", 2.2, 57_000_000_000),
    CryptoCoin("polkadot", "DOT", "Polkadot", "paritytech/polkadot-sdk", 7.5, 1_400_000_000),
    CryptoCoin("avalanche-2", "AVAX", "Avalanche", "ava-labs/avalanchego", 40.0, 400_000_000),
)

_BY_ID = {coin.id: coin for coin in CRYPTO_COINS}


def get_coin(coin_id: str) -> CryptoCoin | None:
    return _BY_ID.get(coin_id)


def is_supported_coin(coin_id: str) -> bool:
    return coin_id in _BY_ID
