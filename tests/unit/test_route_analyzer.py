import pytest

from wac.core.chains import ARBITRUM, ETHEREUM
from wac.core.routes import RouteAnalyzer, adjust_for_slippage, rank_routes, route_reasoning
from wac.providers.base import ProtocolQuote
from wac.providers.quotes import RandomQuoteSource, StaticQuoteSource
from wac.types.routes import RouteOption

# Ethereum protocols are Uniswap V3, Uniswap V2, 1inch, SushiSwap (in that order).
# Totals: Uniswap 22 / 3min, 1inch 11 / 5min, SushiSwap 33 / 2min.
QUOTES = StaticQuoteSource(
    protocols={
        "1inch": ProtocolQuote(gas_cost=10, protocol_fee=1, estimated_time=5, slippage=0.2, price_impact=0.05, output_amount=0),
        "SushiSwap": ProtocolQuote(gas_cost=30, protocol_fee=3, estimated_time=2, slippage=0.8, price_impact=0.05, output_amount=0),
    }
)


def _route(name, cost, minutes, confidence=0.9):
    return RouteOption(
        id=name,
        name=name,
        protocol=name,
        total_cost=cost,
        execution_time=minutes,
        gas_estimate=cost,
        slippage=0.3,
        price_impact=0.05,
        confidence=confidence,
    )


class TestSameChainRoutes:
    """Ranking and explanation of direct swaps."""

    @pytest.mark.asyncio
    async def test_cheapest_preference(self):
        analysis = await RouteAnalyzer(QUOTES).analyze_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM, "cheapest")

        recommended = analysis.recommended_route
        assert recommended.name == "1inch Direct Swap"
        assert recommended.optimal is True
        assert recommended.total_cost == pytest.approx(11 * 1.005)
        assert recommended.slippage == 0.5
        assert recommended.confidence == pytest.approx(0.895)
        assert recommended.reasoning == "1inch Direct Swap offers good execution with 90% reliability."
        assert [r.name for r in analysis.alternative_routes] == [
            "Uniswap V3 Direct Swap",
            "Uniswap V2 Direct Swap",
            "SushiSwap Direct Swap",
        ]
        assert all(r.optimal is False for r in analysis.alternative_routes)

    @pytest.mark.asyncio
    async def test_fastest_preference(self):
        analysis = await RouteAnalyzer(QUOTES).analyze_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM, "fastest")

        assert analysis.recommended_route.name == "SushiSwap Direct Swap"
        # route slippage above tolerance is kept
        assert analysis.recommended_route.slippage == 0.8
        assert analysis.alternative_routes[-1].name == "1inch Direct Swap"

    @pytest.mark.asyncio
    async def test_balanced_preference(self):
        analysis = await RouteAnalyzer(QUOTES).analyze_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM, "balanced")

        names = [analysis.recommended_route.name] + [r.name for r in analysis.alternative_routes]
        assert names == [
            "Uniswap V3 Direct Swap",
            "Uniswap V2 Direct Swap",
            "1inch Direct Swap",
            "SushiSwap Direct Swap",
        ]

    @pytest.mark.asyncio
    async def test_reasoning_and_comparisons(self):
        analysis = await RouteAnalyzer(QUOTES).analyze_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM, "cheapest")

        assert analysis.reasoning.startswith("For cheapest execution, I recommend 1inch Direct Swap.")
        assert "compared to Uniswap V3 Direct Swap" in analysis.reasoning
        assert "No bridge fees required since this is a same-chain swap." in analysis.reasoning
        assert "Minimal price impact of 0.05%." in analysis.reasoning
        assert analysis.cost_comparison.cheapest.name == "1inch Direct Swap"
        assert analysis.cost_comparison.most_expensive.name == "SushiSwap Direct Swap"
        assert analysis.time_comparison.fastest.name == "SushiSwap Direct Swap"
        assert analysis.time_comparison.time_saved == pytest.approx(3)
        assert analysis.risk_assessment.risk_level == "low"

    @pytest.mark.asyncio
    async def test_failing_protocol_is_skipped(self):
        quotes = StaticQuoteSource(failing=("Uniswap V2",))
        routes = await RouteAnalyzer(quotes).find_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM)
        assert [r.protocol for r in routes] == ["Uniswap V3", "1inch", "SushiSwap"]

    @pytest.mark.asyncio
    async def test_no_routes_returns_none(self):
        analysis = await RouteAnalyzer(StaticQuoteSource()).analyze_routes("USDC", "ETH", 500, 999, 999)
        assert analysis is None


class TestCrossChainRoutes:

    @pytest.mark.asyncio
    async def test_bridge_plus_swap_composite(self):
        routes = await RouteAnalyzer(StaticQuoteSource()).find_routes("USDC", "ETH", 500, ETHEREUM, ARBITRUM)

        assert [r.name for r in routes] == [
            "Hop Protocol Bridge + Swap",
            "Across Bridge + Swap",
            "Synapse Bridge + Swap",
        ]
        hop = routes[0]
        assert hop.protocol == "Hop Protocol + Uniswap V3"
        assert hop.total_cost == pytest.approx(8 + 15 + 12 + 1)
        assert hop.execution_time == pytest.approx(12)
        assert hop.gas_estimate == pytest.approx(27)
        assert hop.bridge_fees == 8
        assert hop.slippage == pytest.approx(0.2)
        assert hop.price_impact == pytest.approx(0.1)
        assert [r.confidence for r in routes] == [0.9, 0.85, 0.8]
        assert [step.action for step in hop.route] == ["bridge", "swap"]
        assert hop.route[1].chain_name == "Arbitrum"

    @pytest.mark.asyncio
    async def test_cross_chain_risk_mentions_bridge(self):
        analysis = await RouteAnalyzer(StaticQuoteSource()).analyze_routes("USDC", "ETH", 500, ETHEREUM, ARBITRUM)

        assert "Cross-chain bridge required" in analysis.risk_assessment.factors
        assert "Low bridge fees of $8.00." in analysis.reasoning

    @pytest.mark.asyncio
    async def test_random_quotes_stay_in_range(self):
        import random

        analyzer = RouteAnalyzer(RandomQuoteSource(random.Random(1)))
        routes = await analyzer.find_routes("USDC", "ETH", 500, ETHEREUM, ETHEREUM)
        for route in routes:
            assert 10 <= route.gas_estimate <= 60
            assert 2 <= route.execution_time <= 7


class TestRanking:

    def test_unknown_preference_ranks_by_confidence(self):
        ranked = rank_routes([_route("a", 1, 1, 0.8), _route("b", 2, 2, 0.95)], "whatever")
        assert [r.name for r in ranked] == ["b", "a"]
        assert ranked[0].optimal is True

    def test_ties_keep_discovery_order(self):
        ranked = rank_routes([_route("a", 5, 1), _route("b", 5, 1)], "cheapest")
        assert [r.name for r in ranked] == ["a", "b"]

    def test_balanced_with_identical_routes(self):
        ranked = rank_routes([_route("a", 5, 1), _route("b", 5, 1)], "balanced")
        assert [r.name for r in ranked] == ["a", "b"]

    def test_empty(self):
        assert rank_routes([], "cheapest") == []

    def test_slippage_never_below_tolerance(self):
        adjusted = adjust_for_slippage(_route("a", 100, 1), 1.0)
        assert adjusted.slippage == 1.0
        assert adjusted.total_cost == pytest.approx(101)

    def test_reasoning_text(self):
        assert route_reasoning(_route("Velodrome", 1, 1, 0.95)) == "Velodrome offers good execution with 95% reliability."
