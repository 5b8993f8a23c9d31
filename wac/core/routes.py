"""
Route discovery and ranking for swaps.

Candidate routes are built from an injected `QuoteSource`, ranked by the
user's preference, then adjusted for slippage tolerance without reordering.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..providers.base import QuoteSource
from ..types.intent import RoutePreference
from ..types.routes import (
    CostBreakdown,
    FeeBreakdown,
    RouteAnalysis,
    RouteOption,
    RouteRiskAssessment,
    RouteStep,
    TimeBreakdown,
)
from .chains import BRIDGES, chain_name, protocols_for

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3


def _normalized(value: float, low: float, high: float) -> float:
    if high == low:
        return 0.0
    return (value - low) / (high - low)


def rank_routes(routes: List[RouteOption], preference: Optional[str]) -> List[RouteOption]:
    """
    Order routes by preference and mark the first one optimal.

    Unknown preferences rank by confidence. Ties keep their discovery order.
    """
    if preference == "cheapest":
        ranked = sorted(routes, key=lambda r: r.total_cost)
    elif preference == "fastest":
        ranked = sorted(routes, key=lambda r: r.execution_time)
    elif preference == "balanced" and routes:
        costs = [r.total_cost for r in routes]
        times = [r.execution_time for r in routes]
        low_cost, high_cost = min(costs), max(costs)
        low_time, high_time = min(times), max(times)

        def score(route: RouteOption) -> float:
            cost_score = _normalized(route.total_cost, low_cost, high_cost)
            time_score = _normalized(route.execution_time, low_time, high_time)
            return (cost_score + time_score) / 2

        ranked = sorted(routes, key=score)
    else:
        ranked = sorted(routes, key=lambda r: r.confidence, reverse=True)

    ranked = [route.model_copy(update={"optimal": False}) for route in ranked]
    if ranked:
        ranked[0] = ranked[0].model_copy(update={"optimal": True})
    return ranked


def route_reasoning(route: RouteOption) -> str:
    return f"{route.name} offers good execution with {route.confidence * 100:g}% reliability."


def adjust_for_slippage(route: RouteOption, slippage_tolerance: float) -> RouteOption:
    slippage = max(route.slippage, slippage_tolerance)
    slippage_cost = route.total_cost * (slippage / 100)
    return route.model_copy(
        update={
            "total_cost": route.total_cost + slippage_cost,
            "slippage": slippage,
            "reasoning": route_reasoning(route),
            "confidence": max(0.1, route.confidence - route.price_impact * 0.1),
        }
    )


def summarize(recommended: RouteOption, alternatives: List[RouteOption], preference: str) -> str:
    reasoning = f"For {preference} execution, I recommend {recommended.name}. "

    if alternatives:
        runner_up = alternatives[0]
        cost_savings = runner_up.total_cost - recommended.total_cost
        time_savings = runner_up.execution_time - recommended.execution_time
        if cost_savings > 0:
            reasoning += f"This saves you ${cost_savings:.2f} compared to {runner_up.name}. "
        if time_savings > 0:
            reasoning += f"Execution time is {time_savings:.1f} minutes faster. "

    if recommended.bridge_fees == 0:
        reasoning += "No bridge fees required since this is a same-chain swap. "
    elif recommended.bridge_fees < 10:
        reasoning += f"Low bridge fees of ${recommended.bridge_fees:.2f}. "

    if recommended.price_impact < 0.1:
        reasoning += f"Minimal price impact of {recommended.price_impact:.2f}%. "

    return reasoning.strip()


def compare_costs(routes: List[RouteOption]) -> CostBreakdown:
    cheapest = min(routes, key=lambda r: r.total_cost)
    most_expensive = max(routes, key=lambda r: r.total_cost)
    return CostBreakdown(
        cheapest=cheapest,
        most_expensive=most_expensive,
        savings=most_expensive.total_cost - cheapest.total_cost,
        fee_breakdown=FeeBreakdown(
            gas=cheapest.gas_estimate,
            bridge=cheapest.bridge_fees,
            protocol=cheapest.total_cost - cheapest.gas_estimate - cheapest.bridge_fees,
            slippage=cheapest.total_cost * (cheapest.slippage / 100),
        ),
    )


def compare_times(routes: List[RouteOption]) -> TimeBreakdown:
    fastest = min(routes, key=lambda r: r.execution_time)
    slowest = max(routes, key=lambda r: r.execution_time)
    return TimeBreakdown(
        fastest=fastest,
        slowest=slowest,
        time_saved=slowest.execution_time - fastest.execution_time,
    )


def assess_route_risk(route: RouteOption) -> RouteRiskAssessment:
    risk_level = "low"
    factors: List[str] = []
    mitigations: List[str] = []

    if route.price_impact > 1:
        risk_level = "high"
        factors.append("High price impact")
        mitigations.append("Consider smaller trade size or alternative route")

    if route.bridge_fees > 0:
        factors.append("Cross-chain bridge required")
        mitigations.append("Monitor bridge status before execution")

    if route.confidence < 0.8:
        if risk_level != "high":
            risk_level = "medium"
        factors.append("Lower confidence route")
        mitigations.append("Consider alternative with higher confidence")

    return RouteRiskAssessment(risk_level=risk_level, factors=factors, mitigations=mitigations)


class RouteAnalyzer:
    """Finds, ranks and explains execution routes for a validated swap."""

    def __init__(self, quotes: QuoteSource, *, slippage_tolerance: float = 0.5) -> None:
        self.quotes = quotes
        self.slippage_tolerance = slippage_tolerance

    async def analyze_routes(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        from_chain: int,
        to_chain: int,
        preference: RoutePreference = "cheapest",
        slippage_tolerance: Optional[float] = None,
    ) -> Optional[RouteAnalysis]:
        tolerance = self.slippage_tolerance if slippage_tolerance is None else slippage_tolerance

        candidates = await self.find_routes(from_token, to_token, amount, from_chain, to_chain)
        if not candidates:
            logger.warning(
                f"No routes found for {amount} {from_token} -> {to_token} "
                f"on {chain_name(from_chain)} -> {chain_name(to_chain)}"
            )
            return None

        ranked = [adjust_for_slippage(route, tolerance) for route in rank_routes(candidates, preference)]
        recommended = ranked[0]
        alternatives = ranked[1:1 + MAX_ALTERNATIVES]

        return RouteAnalysis(
            recommended_route=recommended,
            alternative_routes=alternatives,
            reasoning=summarize(recommended, alternatives, preference),
            cost_comparison=compare_costs(ranked),
            time_comparison=compare_times(ranked),
            risk_assessment=assess_route_risk(recommended),
        )

    async def find_routes(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        from_chain: int,
        to_chain: int,
    ) -> List[RouteOption]:
        if from_chain == to_chain:
            return await self._same_chain_routes(from_token, to_token, amount, from_chain)
        routes = await self._cross_chain_routes(from_token, to_token, amount, from_chain, to_chain)
        routes.extend(await self._swap_first_routes(from_token, to_token, amount, from_chain, to_chain))
        return routes

    async def _same_chain_routes(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        chain_id: int,
    ) -> List[RouteOption]:
        routes: List[RouteOption] = []
        for protocol, confidence in protocols_for(chain_id):
            try:
                quote = await self.quotes.protocol_quote(protocol, from_token, to_token, amount, chain_id)
            except LookupError as e:
                logger.warning(f"Failed to get quote from {protocol}: {e}")
                continue

            routes.append(
                RouteOption(
                    id=f"{protocol}_{chain_id}",
                    name=f"{protocol} Direct Swap",
                    protocol=protocol,
                    total_cost=quote.gas_cost + quote.protocol_fee,
                    execution_time=quote.estimated_time,
                    gas_estimate=quote.gas_cost,
                    bridge_fees=0.0,
                    slippage=quote.slippage,
                    price_impact=quote.price_impact,
                    confidence=confidence,
                    route=[
                        RouteStep(
                            chain_id=chain_id,
                            chain_name=chain_name(chain_id),
                            protocol=protocol,
                            action="swap",
                            from_token=from_token,
                            to_token=to_token,
                            amount=amount,
                            gas_cost=quote.gas_cost,
                            estimated_time=quote.estimated_time,
                        )
                    ],
                )
            )
        return routes

    async def _cross_chain_routes(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        from_chain: int,
        to_chain: int,
    ) -> List[RouteOption]:
        routes: List[RouteOption] = []
        for bridge, bridge_confidence in BRIDGES:
            try:
                bridge_quote = await self.quotes.bridge_quote(bridge, amount, from_chain, to_chain)
                swap_quote = await self.quotes.swap_quote(from_token, to_token, amount, to_chain)
            except LookupError as e:
                logger.warning(f"Failed to get cross-chain quote via {bridge}: {e}")
                continue

            routes.append(
                RouteOption(
                    id=f"{bridge}_bridge_swap",
                    name=f"{bridge} Bridge + Swap",
                    protocol=f"{bridge} + {swap_quote.protocol}",
                    total_cost=(
                        bridge_quote.fee
                        + bridge_quote.gas_cost
                        + swap_quote.gas_cost
                        + swap_quote.protocol_fee
                    ),
                    execution_time=bridge_quote.time + swap_quote.time,
                    gas_estimate=bridge_quote.gas_cost + swap_quote.gas_cost,
                    bridge_fees=bridge_quote.fee,
                    slippage=max(bridge_quote.slippage, swap_quote.slippage),
                    price_impact=bridge_quote.price_impact + swap_quote.price_impact,
                    confidence=min(bridge_confidence, swap_quote.confidence),
                    route=[
                        RouteStep(
                            chain_id=from_chain,
                            chain_name=chain_name(from_chain),
                            protocol=bridge,
                            action="bridge",
                            from_token=from_token,
                            to_token=from_token,
                            amount=amount,
                            gas_cost=bridge_quote.gas_cost,
                            estimated_time=bridge_quote.time,
                        ),
                        RouteStep(
                            chain_id=to_chain,
                            chain_name=chain_name(to_chain),
                            protocol=swap_quote.protocol,
                            action="swap",
                            from_token=from_token,
                            to_token=to_token,
                            amount=amount,
                            gas_cost=swap_quote.gas_cost,
                            estimated_time=swap_quote.time,
                        ),
                    ],
                )
            )
        return routes

    async def _swap_first_routes(
        self,
        from_token: str,
        to_token: str,
        amount: float,
        from_chain: int,
        to_chain: int,
    ) -> List[RouteOption]:
        """Swap on the source chain, then bridge the output. No venues are wired up yet."""
        return []
