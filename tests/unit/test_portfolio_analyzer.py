import pytest

from conftest import WALLET, FakeBackend, portfolio_payload, prices_payload
from wac.core.chains import ARBITRUM, ETHEREUM, POLYGON
from wac.core.portfolio import PortfolioAnalyzer, estimate_gas_cost, market_context_from_price
from wac.types.backend import PortfolioAsset, PortfolioResponse, PortfolioSummary, TokenPrice

PORTFOLIO_PATH = f"/portfolio/{WALLET}"


def _asset(symbol, balance, chain_id):
    return {"symbol": symbol, "balance": balance, "chainId": chain_id}


def _analyzer(make_client, routes):
    return PortfolioAnalyzer(make_client(FakeBackend(routes)))


class TestAnalyzeSwapRequest:
    """Balance validation against the backend portfolio."""

    @pytest.mark.asyncio
    async def test_sufficient_funds_across_chains(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([
                _asset("USDC", 600, ARBITRUM),
                _asset("USDC", 200, ETHEREUM),
                _asset("ETH", 3, ETHEREUM),
            ]),
            "/market/prices": prices_payload({"USDC": {"symbol": "USDC", "price": 1.0}}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        assert analysis.has_sufficient_funds is True
        assert analysis.total_balance == 800
        assert analysis.available_amount == 500
        assert analysis.requested_amount == 500
        assert analysis.chain_distribution[0].chain_id == ARBITRUM
        assert analysis.chain_distribution[0].optimal is True
        assert analysis.chain_distribution[1].chain_id == ETHEREUM
        assert analysis.chain_distribution[1].optimal is False
        assert len(analysis.chain_distribution) == 5
        assert analysis.risk_assessment.portfolio_percentage == pytest.approx(5.0)
        assert analysis.risk_assessment.risk_level == "low"

    @pytest.mark.asyncio
    async def test_requests_full_refreshed_portfolio(self, make_client):
        backend = FakeBackend({PORTFOLIO_PATH: portfolio_payload([]), "/market/prices": prices_payload({})})
        analyzer = PortfolioAnalyzer(make_client(backend))

        await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 10)

        portfolio_request = next(r for r in backend.requests if r.url.path == PORTFOLIO_PATH)
        assert portfolio_request.url.params["chains"] == "all"
        assert portfolio_request.url.params["refresh"] == "true"
        prices_request = next(r for r in backend.requests if r.url.path == "/market/prices")
        assert prices_request.url.params["symbols"] == "USDC,ETH"

    @pytest.mark.asyncio
    async def test_insufficient_funds_recommends_available_amount(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([_asset("USDC", 300, ETHEREUM)]),
            "/market/prices": prices_payload({}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        assert analysis.has_sufficient_funds is False
        assert analysis.available_amount == 300
        titles = [r.title for r in analysis.recommendations]
        assert titles == ["Swap Available Amount"]
        assert analysis.recommendations[0].description == "You have $300.00 available. Swap 300 USDC instead?"

    @pytest.mark.asyncio
    async def test_small_deficit_suggests_bridging(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([_asset("USDC", 400, ETHEREUM)]),
            "/market/prices": prices_payload({}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        titles = [r.title for r in analysis.recommendations]
        assert titles == ["Swap Available Amount", "Bridge Additional Funds"]
        assert "$100.00" in analysis.recommendations[1].description

    @pytest.mark.asyncio
    async def test_cheaper_optimal_chain_recommended(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([
                _asset("USDC", 1000, ARBITRUM),
                _asset("USDC", 600, POLYGON),
            ]),
            "/market/prices": prices_payload({}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        fee_recs = [r for r in analysis.recommendations if r.title == "Use Polygon for Lower Fees"]
        assert len(fee_recs) == 1
        assert fee_recs[0].savings == "$10.00"

    @pytest.mark.asyncio
    async def test_chain_savings_only_for_cheapest_preference(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([
                _asset("USDC", 1000, ARBITRUM),
                _asset("USDC", 600, POLYGON),
            ]),
            "/market/prices": prices_payload({}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500, "fastest")

        assert analysis.recommendations == []

    @pytest.mark.asyncio
    async def test_volatile_market_adds_timing_advice(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: portfolio_payload([_asset("USDC", 1000, ARBITRUM)]),
            "/market/prices": prices_payload({
                "ETH": {"symbol": "ETH", "price": 1700, "changePercent": 7.0, "volume24h": 5_000_000},
            }),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        assert analysis.market_context.trend == "bullish"
        assert analysis.market_context.optimal_timing is False
        timing = [r for r in analysis.recommendations if r.type == "market_timing"]
        assert timing[0].description == "ETH is up 7.0% today. Consider DCA or waiting."

    @pytest.mark.asyncio
    async def test_backend_failure_degrades_to_empty_portfolio(self, make_client):
        analyzer = _analyzer(make_client, {
            PORTFOLIO_PATH: (500, {"error": "boom"}),
            "/market/prices": (500, {"error": "boom"}),
        })

        analysis = await analyzer.analyze_swap_request(WALLET, "USDC", "ETH", 500)

        assert analysis.has_sufficient_funds is False
        assert analysis.total_balance == 0
        assert analysis.risk_assessment.portfolio_percentage == 0
        assert all(chain.balance == 0 for chain in analysis.chain_distribution)


class TestAssessRisk:

    def _portfolio(self, total_value, assets=2):
        return PortfolioResponse(
            summary=PortfolioSummary(total_value=total_value),
            assets=[PortfolioAsset(symbol=f"T{i}") for i in range(assets)],
        )

    def test_high_risk_over_half_of_portfolio(self):
        prices = {"ETH": TokenPrice(symbol="ETH", price=2000)}
        risk = PortfolioAnalyzer.assess_risk(self._portfolio(3000), "ETH", 1, prices)
        assert risk.risk_level == "high"
        assert risk.portfolio_percentage == pytest.approx(66.666, rel=1e-3)

    def test_medium_risk(self):
        risk = PortfolioAnalyzer.assess_risk(self._portfolio(1000), "USDC", 300, {})
        assert risk.risk_level == "medium"

    def test_single_asset_flags_diversification(self):
        risk = PortfolioAnalyzer.assess_risk(self._portfolio(1000, assets=1), "USDC", 10, {})
        assert "Your portfolio lacks diversification" in risk.warnings

    def test_empty_portfolio_is_zero_percent(self):
        risk = PortfolioAnalyzer.assess_risk(None, "USDC", 10, {})
        assert risk.portfolio_percentage == 0
        assert risk.risk_level == "low"


class TestHelpers:

    def test_gas_estimates_scale_with_chain(self):
        assert estimate_gas_cost(ETHEREUM) == 50
        assert estimate_gas_cost(POLYGON) == pytest.approx(5)
        assert estimate_gas_cost(999) == 50

    def test_market_context_neutral_without_price(self):
        context = market_context_from_price(None)
        assert context.trend == "neutral"
        assert context.optimal_timing is True

    def test_low_volume_moves_stay_neutral(self):
        price = TokenPrice(symbol="ETH", price=1600, change_percent=-4, volume_24h=10)
        context = market_context_from_price(price)
        assert context.trend == "neutral"
        assert context.optimal_timing is True
