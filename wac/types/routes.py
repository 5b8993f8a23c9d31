from typing import List, Literal

from pydantic import Field

from .base import CamelModel
from .portfolio import RiskLevel

StepAction = Literal["swap", "bridge", "approve"]


class RouteStep(CamelModel):
    chain_id: int
    chain_name: str
    protocol: str
    action: StepAction
    from_token: str
    to_token: str
    amount: float
    gas_cost: float
    estimated_time: float


class RouteOption(CamelModel):
    id: str
    name: str
    protocol: str
    total_cost: float = Field(description="Gas plus fees in USD")
    execution_time: float = Field(description="Estimated minutes until settlement")
    gas_estimate: float
    bridge_fees: float = 0.0
    slippage: float = Field(description="Slippage in percent")
    price_impact: float = Field(description="Price impact in percent")
    confidence: float
    route: List[RouteStep] = Field(default_factory=list)
    reasoning: str = ""
    optimal: bool = False


class FeeBreakdown(CamelModel):
    gas: float
    bridge: float
    protocol: float
    slippage: float


class CostBreakdown(CamelModel):
    cheapest: RouteOption
    most_expensive: RouteOption
    savings: float
    fee_breakdown: FeeBreakdown


class TimeBreakdown(CamelModel):
    fastest: RouteOption
    slowest: RouteOption
    time_saved: float


class RouteRiskAssessment(CamelModel):
    risk_level: RiskLevel = "low"
    factors: List[str] = Field(default_factory=list)
    mitigations: List[str] = Field(default_factory=list)


class RouteAnalysis(CamelModel):
    recommended_route: RouteOption
    alternative_routes: List[RouteOption] = Field(default_factory=list)
    reasoning: str
    cost_comparison: CostBreakdown
    time_comparison: TimeBreakdown
    risk_assessment: RouteRiskAssessment
