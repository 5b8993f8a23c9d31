"""Market data used by the chat pipeline and the market endpoints."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..types.backend import PricesResponse, TrendingResponse
from .gateway import BackendGateway

# Reference prices for the synthetic snapshot; unknown tokens are priced at 1.
BASE_PRICES: Dict[str, float] = {
    "ETH": 1600.0,
    "BTC": 30000.0,
    "MATIC": 0.55,
    "ARB": 0.95,
    "OP": 1.35,
}
DEFAULT_VOLUME_24H = 1_000_000_000
MAX_DAILY_SWING = 5.0


@dataclass
class MarketSnapshot:
    current_price: float
    price_change_24h: float
    trend: str = "neutral"
    gas_environment: str = "medium"
    volume_24h: float = DEFAULT_VOLUME_24H
    sentiment: str = "neutral"


class MarketService:
    """Synthetic per-token snapshots plus backend price and trending lookups."""

    def __init__(self, gateway: Optional[BackendGateway] = None, *, rng: Optional[random.Random] = None) -> None:
        self.gateway = gateway
        self._rng = rng or random.Random()

    async def snapshot(self, token: str) -> MarketSnapshot:
        price = BASE_PRICES.get(token.upper(), 1.0)
        change = (self._rng.random() - 0.5) * 2 * MAX_DAILY_SWING
        return MarketSnapshot(current_price=price, price_change_24h=change)

    async def prices(self, symbols: List[str], chain_id: int = 1) -> PricesResponse:
        if self.gateway is None:
            raise RuntimeError("MarketService has no backend gateway")
        return await self.gateway.get_prices(symbols, chain_id)

    async def trending(self, chain_id: int = 1, limit: int = 10) -> TrendingResponse:
        if self.gateway is None:
            raise RuntimeError("MarketService has no backend gateway")
        return await self.gateway.get_trending(chain_id, limit)
