"""
Synthetic quote sources.

Nothing here talks to a DEX or bridge: `RandomQuoteSource` draws plausible
numbers from fixed ranges and `StaticQuoteSource` returns fixed numbers so route
ranking can be asserted exactly.
"""

import random
from typing import Dict, Optional, Tuple

from ..core.chains import DESTINATION_SWAP_PROTOCOL
from .base import BridgeQuote, ProtocolQuote, QuoteSource, SwapQuote


class RandomQuoteSource(QuoteSource):
    """Quotes drawn uniformly from the ranges a live aggregator typically returns."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def _between(self, low: float, high: float) -> float:
        return low + self._rng.random() * (high - low)

    async def protocol_quote(self, protocol, from_token, to_token, amount, chain_id) -> ProtocolQuote:
        return ProtocolQuote(
            gas_cost=self._between(10, 60),
            protocol_fee=self._between(0, 5),
            estimated_time=self._between(2, 7),
            slippage=self._between(0.1, 0.6),
            price_impact=self._between(0, 0.2),
            output_amount=amount * 0.99,
        )

    async def bridge_quote(self, bridge, amount, from_chain, to_chain) -> BridgeQuote:
        return BridgeQuote(
            fee=self._between(5, 25),
            gas_cost=self._between(10, 40),
            time=self._between(5, 15),
            slippage=self._between(0, 0.3),
            price_impact=self._between(0, 0.1),
        )

    async def swap_quote(self, from_token, to_token, amount, chain_id) -> SwapQuote:
        protocol, confidence = DESTINATION_SWAP_PROTOCOL
        return SwapQuote(
            protocol=protocol,
            gas_cost=self._between(10, 40),
            protocol_fee=self._between(0, 3),
            time=self._between(1, 4),
            slippage=self._between(0, 0.3),
            price_impact=self._between(0, 0.15),
            confidence=confidence,
        )


class StaticQuoteSource(QuoteSource):
    """
    Deterministic quotes.

    Protocol and bridge quotes can be overridden by name; anything not listed
    gets the default quote. Names listed in `failing` raise `LookupError`, which
    the route analyzer treats as an unavailable protocol.
    """

    name = "static"

    DEFAULT_PROTOCOL = ProtocolQuote(
        gas_cost=20.0,
        protocol_fee=2.0,
        estimated_time=3.0,
        slippage=0.3,
        price_impact=0.05,
        output_amount=0.0,
    )
    DEFAULT_BRIDGE = BridgeQuote(fee=8.0, gas_cost=15.0, time=10.0, slippage=0.2, price_impact=0.05)
    DEFAULT_SWAP = SwapQuote(
        protocol=DESTINATION_SWAP_PROTOCOL[0],
        gas_cost=12.0,
        protocol_fee=1.0,
        time=2.0,
        slippage=0.1,
        price_impact=0.05,
        confidence=DESTINATION_SWAP_PROTOCOL[1],
    )

    def __init__(
        self,
        protocols: Optional[Dict[str, ProtocolQuote]] = None,
        bridges: Optional[Dict[str, BridgeQuote]] = None,
        swap: Optional[SwapQuote] = None,
        failing: Tuple[str, ...] = (),
    ):
        self.protocols = protocols or {}
        self.bridges = bridges or {}
        self.swap = swap or self.DEFAULT_SWAP
        self.failing = set(failing)

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise LookupError(f"No quote available from {name}")

    async def protocol_quote(self, protocol, from_token, to_token, amount, chain_id) -> ProtocolQuote:
        self._check(protocol)
        quote = self.protocols.get(protocol, self.DEFAULT_PROTOCOL)
        return ProtocolQuote(
            gas_cost=quote.gas_cost,
            protocol_fee=quote.protocol_fee,
            estimated_time=quote.estimated_time,
            slippage=quote.slippage,
            price_impact=quote.price_impact,
            output_amount=amount * 0.99,
        )

    async def bridge_quote(self, bridge, amount, from_chain, to_chain) -> BridgeQuote:
        self._check(bridge)
        return self.bridges.get(bridge, self.DEFAULT_BRIDGE)

    async def swap_quote(self, from_token, to_token, amount, chain_id) -> SwapQuote:
        self._check(self.swap.protocol)
        return self.swap
