from typing import List, Literal, Optional

from pydantic import Field

from .base import CamelModel

RiskLevel = Literal["low", "medium", "high"]
GasEnvironment = Literal["low", "medium", "high"]
Trend = Literal["bullish", "bearish", "neutral"]
RecommendationType = Literal[
    "swap_available",
    "bridge_optimal",
    "reduce_amount",
    "wait_gas",
    "market_timing",
]


class ChainBalance(CamelModel):
    chain_id: int = Field(description="Chain identifier")
    chain_name: str = Field(description="Human readable chain name")
    balance: float = Field(description="Balance of the requested token on this chain")
    gas_estimate: float = Field(description="Estimated swap gas cost in USD")
    bridge_fee: Optional[float] = Field(default=None, description="Estimated bridge fee to Ethereum in USD")
    optimal: bool = Field(default=False, description="Balance covers the request and gas is cheap")


class PortfolioRecommendation(CamelModel):
    type: RecommendationType
    title: str
    description: str
    savings: Optional[str] = None
    confidence: float


class RiskAssessment(CamelModel):
    portfolio_percentage: float = Field(description="Swap value as a percentage of the whole portfolio")
    risk_level: RiskLevel = "low"
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class MarketContext(CamelModel):
    current_price: float = 0.0
    price_change_24h: float = 0.0
    trend: Trend = "neutral"
    gas_environment: GasEnvironment = "medium"
    market_sentiment: str = "neutral"
    optimal_timing: bool = True


class PortfolioAnalysis(CamelModel):
    has_sufficient_funds: bool
    available_amount: float
    total_balance: float
    requested_amount: float
    chain_distribution: List[ChainBalance] = Field(default_factory=list)
    recommendations: List[PortfolioRecommendation] = Field(default_factory=list)
    risk_assessment: RiskAssessment
    market_context: MarketContext = Field(default_factory=MarketContext)
