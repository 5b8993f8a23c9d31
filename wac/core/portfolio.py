"""Balance validation, chain distribution and risk checks for a swap request."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from ..providers.backend import BackendClient
from ..providers.errors import BackendError
from ..types.backend import PortfolioResponse, TokenPrice
from ..types.intent import RoutePreference
from ..types.portfolio import (
    ChainBalance,
    MarketContext,
    PortfolioAnalysis,
    PortfolioRecommendation,
    RiskAssessment,
)
from .chains import (
    BASE_SWAP_GAS_USD,
    BRIDGE_FEE_USD,
    CHEAP_GAS_THRESHOLD_USD,
    ETHEREUM,
    PORTFOLIO_CHAINS,
    chain_name,
    gas_multiplier,
)

logger = logging.getLogger(__name__)

MIN_CHAIN_SAVINGS_USD = 5.0
TIMING_CHANGE_THRESHOLD = 5.0
TREND_CHANGE_THRESHOLD = 3.0
TREND_MIN_VOLUME = 1_000_000


def estimate_gas_cost(chain_id: int) -> float:
    return BASE_SWAP_GAS_USD * gas_multiplier(chain_id)


def estimate_bridge_fee(from_chain: int, to_chain: int = ETHEREUM) -> float:
    if from_chain == to_chain:
        return 0.0
    return BRIDGE_FEE_USD


def is_optimal_chain(balance: float, gas_estimate: float, requested: float) -> bool:
    return balance >= requested and gas_estimate < CHEAP_GAS_THRESHOLD_USD


def market_context_from_price(price: Optional[TokenPrice]) -> MarketContext:
    """Derive timing signals from a token's price entry; neutral when unknown."""
    if price is None:
        return MarketContext()

    change = price.change_percent
    volume = price.volume_24h or 0.0
    trend = "neutral"
    if change > TREND_CHANGE_THRESHOLD and volume > TREND_MIN_VOLUME:
        trend = "bullish"
    elif change < -TREND_CHANGE_THRESHOLD and volume > TREND_MIN_VOLUME:
        trend = "bearish"

    return MarketContext(
        current_price=price.price,
        price_change_24h=change,
        trend=trend,
        gas_environment="medium",
        market_sentiment="neutral",
        optimal_timing=abs(change) < TIMING_CHANGE_THRESHOLD,
    )


class PortfolioAnalyzer:
    """Checks whether a wallet can fund a swap and where it should execute."""

    def __init__(
        self,
        backend: BackendClient,
        *,
        chains: Sequence[int] = PORTFOLIO_CHAINS,
    ) -> None:
        self.backend = backend
        self.chains = tuple(chains)

    async def analyze_swap_request(
        self,
        wallet_address: str,
        from_token: str,
        to_token: str,
        requested_amount: float,
        preference: RoutePreference = "cheapest",
    ) -> PortfolioAnalysis:
        portfolio, prices = await asyncio.gather(
            self._fetch_portfolio(wallet_address),
            self._fetch_prices([from_token, to_token]),
        )
        market = market_context_from_price(prices.get(to_token))

        distribution = self.analyze_chain_distribution(portfolio, from_token, requested_amount)
        total_balance = sum(chain.balance for chain in distribution)

        recommendations = self.generate_recommendations(
            distribution,
            requested_amount,
            total_balance,
            preference,
            market,
            from_token=from_token,
            to_token=to_token,
        )
        risk = self.assess_risk(portfolio, from_token, requested_amount, prices)

        return PortfolioAnalysis(
            has_sufficient_funds=total_balance >= requested_amount,
            available_amount=min(total_balance, requested_amount),
            total_balance=total_balance,
            requested_amount=requested_amount,
            chain_distribution=distribution,
            recommendations=recommendations,
            risk_assessment=risk,
            market_context=market,
        )

    async def _fetch_portfolio(self, wallet_address: str) -> Optional[PortfolioResponse]:
        try:
            return await self.backend.get_portfolio(wallet_address, chains="all", refresh=True)
        except BackendError as e:
            logger.warning(f"Portfolio data fetch failed for {wallet_address}: {e}")
            return None

    async def _fetch_prices(self, symbols: List[str]) -> Dict[str, TokenPrice]:
        try:
            response = await self.backend.get_prices(symbols)
        except BackendError as e:
            logger.warning(f"Price data fetch failed for {','.join(symbols)}: {e}")
            return {}
        return response.prices

    @staticmethod
    def token_balance_on_chain(
        portfolio: Optional[PortfolioResponse],
        token: str,
        chain_id: int,
    ) -> float:
        if portfolio is None:
            return 0.0
        for asset in portfolio.assets:
            if asset.symbol == token and asset.chain_id == chain_id:
                return asset.balance
        return 0.0

    def analyze_chain_distribution(
        self,
        portfolio: Optional[PortfolioResponse],
        token: str,
        requested_amount: float,
    ) -> List[ChainBalance]:
        balances = []
        for chain_id in self.chains:
            balance = self.token_balance_on_chain(portfolio, token, chain_id)
            gas = estimate_gas_cost(chain_id)
            balances.append(
                ChainBalance(
                    chain_id=chain_id,
                    chain_name=chain_name(chain_id),
                    balance=balance,
                    gas_estimate=gas,
                    bridge_fee=estimate_bridge_fee(chain_id),
                    optimal=is_optimal_chain(balance, gas, requested_amount),
                )
            )

        # optimal chains first, then largest balance
        return sorted(balances, key=lambda c: (not c.optimal, -c.balance))

    def generate_recommendations(
        self,
        distribution: List[ChainBalance],
        requested_amount: float,
        total_balance: float,
        preference: str,
        market: MarketContext,
        *,
        from_token: str,
        to_token: str,
    ) -> List[PortfolioRecommendation]:
        recommendations: List[PortfolioRecommendation] = []

        if total_balance < requested_amount:
            deficit = requested_amount - total_balance
            unit = from_token if distribution and distribution[0].balance > 0 else "tokens"
            recommendations.append(
                PortfolioRecommendation(
                    type="reduce_amount",
                    title="Swap Available Amount",
                    description=(
                        f"You have ${total_balance:.2f} available. "
                        f"Swap {total_balance:.0f} {unit} instead?"
                    ),
                    confidence=0.9,
                )
            )
            if deficit < total_balance * 0.5:
                recommendations.append(
                    PortfolioRecommendation(
                        type="bridge_optimal",
                        title="Bridge Additional Funds",
                        description=f"Bridge ${deficit:.2f} from another chain to complete your swap",
                        confidence=0.7,
                    )
                )

        optimal_chains = [chain for chain in distribution if chain.optimal]
        if optimal_chains and preference == "cheapest":
            top = distribution[0]
            cheapest = min(optimal_chains, key=lambda c: c.gas_estimate)
            savings = top.gas_estimate - cheapest.gas_estimate
            if savings >= MIN_CHAIN_SAVINGS_USD:
                recommendations.append(
                    PortfolioRecommendation(
                        type="bridge_optimal",
                        title=f"Use {cheapest.chain_name} for Lower Fees",
                        description=f"Swap on {cheapest.chain_name} to save ${savings:.2f} in gas fees",
                        savings=f"${savings:.2f}",
                        confidence=0.85,
                    )
                )

        if market.gas_environment == "high":
            recommendations.append(
                PortfolioRecommendation(
                    type="wait_gas",
                    title="High Gas Environment",
                    description="Consider waiting for lower gas fees or using a Layer 2 solution",
                    confidence=0.7,
                )
            )

        change = market.price_change_24h
        if not market.optimal_timing and abs(change) > TIMING_CHANGE_THRESHOLD:
            direction = "up" if change > 0 else "down"
            recommendations.append(
                PortfolioRecommendation(
                    type="market_timing",
                    title="Consider Market Timing",
                    description=f"{to_token} is {direction} {abs(change):.1f}% today. Consider DCA or waiting.",
                    confidence=0.6,
                )
            )

        return sorted(recommendations, key=lambda r: r.confidence, reverse=True)

    @staticmethod
    def assess_risk(
        portfolio: Optional[PortfolioResponse],
        from_token: str,
        amount: float,
        prices: Dict[str, TokenPrice],
    ) -> RiskAssessment:
        total_value = portfolio.summary.total_value if portfolio else 0.0
        price_entry = prices.get(from_token)
        unit_price = price_entry.price if price_entry and price_entry.price else 1.0
        swap_value = amount * unit_price
        percentage = swap_value / total_value * 100 if total_value > 0 else 0.0

        risk_level = "low"
        warnings: List[str] = []
        suggestions: List[str] = []

        if percentage > 50:
            risk_level = "high"
            warnings.append("This swap represents over 50% of your portfolio")
            suggestions.append("Consider reducing the swap amount or DCA over time")
        elif percentage > 25:
            risk_level = "medium"
            warnings.append("This is a significant portion of your portfolio")
            suggestions.append("Consider your overall asset allocation strategy")

        if portfolio is not None and len(portfolio.assets) == 1:
            warnings.append("Your portfolio lacks diversification")
            suggestions.append("Consider maintaining some stable assets")

        return RiskAssessment(
            portfolio_percentage=percentage,
            risk_level=risk_level,
            warnings=warnings,
            suggestions=suggestions,
        )
