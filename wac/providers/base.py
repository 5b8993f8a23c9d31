from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ProtocolQuote:
    """Single-chain swap quote from one DEX protocol."""
    gas_cost: float
    protocol_fee: float
    estimated_time: float
    slippage: float
    price_impact: float
    output_amount: float


@dataclass
class BridgeQuote:
    fee: float
    gas_cost: float
    time: float
    slippage: float
    price_impact: float


@dataclass
class SwapQuote:
    """Destination-chain swap leg of a bridge + swap route."""
    protocol: str
    gas_cost: float
    protocol_fee: float
    time: float
    slippage: float
    price_impact: float
    confidence: float


class QuoteSource(ABC):
    """Source of swap and bridge quotes used by the route analyzer"""

    name: str

    @abstractmethod
    async def protocol_quote(
        self,
        protocol: str,
        from_token: str,
        to_token: str,
        amount: float,
        chain_id: int,
    ) -> ProtocolQuote:
        """Quote a direct swap on `protocol`"""
        pass

    @abstractmethod
    async def bridge_quote(
        self,
        bridge: str,
        amount: float,
        from_chain: int,
        to_chain: int,
    ) -> BridgeQuote:
        """Quote moving `amount` across chains with `bridge`"""
        pass

    @abstractmethod
    async def swap_quote(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        chain_id: int,
    ) -> SwapQuote:
        """Quote the swap leg executed on the destination chain"""
        pass
