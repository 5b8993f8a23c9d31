"""
Local chat pipeline: intent -> portfolio -> routes -> market -> reply.

Used whenever the remote chat endpoint is unavailable. Every step builds fresh
objects; nothing is kept between requests.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..services.market import MarketService, MarketSnapshot
from ..types.chat import IntelligentChatRequest, IntelligentChatResponse
from ..types.intent import SwapIntent
from ..types.portfolio import PortfolioAnalysis
from ..types.routes import RouteAnalysis, RouteOption
from ..types.talk_to_invest import (
    ActionMetric,
    ActionSummary,
    ExecutionData,
    PrimaryAction,
    TalkToInvestResponse,
)
from .chains import ETHEREUM, chain_name
from .intent import parse_user_intent
from .portfolio import PortfolioAnalyzer
from .routes import RouteAnalyzer

logger = logging.getLogger(__name__)

OUTPUT_RATIO = 0.998
DEFAULT_ROUTE_NAME = "Uniswap V3"
DEFAULT_TOTAL_COST = "25"
DEFAULT_EXECUTION_MINUTES = 2
DEFAULT_GAS_FEE = "15"
DEFAULT_SLIPPAGE = 0.5
DEFAULT_CONFIDENCE = 0.9

CONNECT_WALLET_REPLY = (
    "I'd love to help you with that swap! To provide personalized recommendations and check your "
    "portfolio, please connect your wallet first. Once connected, I can analyze your holdings and "
    "find the optimal route."
)
GENERAL_FALLBACK_REPLY = (
    "I'm having trouble processing your request right now. Please try again and I'll help you with "
    "your Web3 investing needs."
)


class IntelligentChatService:
    """Turns a chat request into a reply, optionally with an actionable swap card."""

    def __init__(
        self,
        portfolio: PortfolioAnalyzer,
        routes: RouteAnalyzer,
        market: MarketService,
    ) -> None:
        self.portfolio = portfolio
        self.routes = routes
        self.market = market

    async def process_request(self, request: IntelligentChatRequest) -> IntelligentChatResponse:
        intent = parse_user_intent(request.user_prompt)
        wallet = request.wallet_address

        portfolio_analysis: Optional[PortfolioAnalysis] = None
        if intent.is_swap and wallet:
            portfolio_analysis = await self.portfolio.analyze_swap_request(
                wallet,
                intent.from_token,
                intent.to_token,
                intent.amount,
                intent.preference or "cheapest",
            )

        # the caller's slippage preference overrides the analyzer default
        slippage = request.context.user_preferences.max_slippage if request.context else None

        route_analysis: Optional[RouteAnalysis] = None
        if intent.is_swap and portfolio_analysis is not None and portfolio_analysis.has_sufficient_funds:
            route_analysis = await self.routes.analyze_routes(
                intent.from_token,
                intent.to_token,
                intent.amount,
                intent.from_chain or ETHEREUM,
                intent.to_chain or ETHEREUM,
                intent.preference or "cheapest",
                slippage_tolerance=slippage,
            )

        market = await self.market.snapshot(intent.to_token or "ETH")

        response = self.generate_response(intent, portfolio_analysis, route_analysis, market, wallet)
        logger.info(
            f"Processed chat request: type={intent.type} requires_action={response.requires_action}"
        )
        return response

    def generate_response(
        self,
        intent: SwapIntent,
        portfolio: Optional[PortfolioAnalysis],
        routes: Optional[RouteAnalysis],
        market: MarketSnapshot,
        wallet_address: Optional[str],
    ) -> IntelligentChatResponse:
        if not intent.is_swap:
            return self.general_response()

        if not wallet_address:
            return IntelligentChatResponse(
                reply=CONNECT_WALLET_REPLY,
                requires_action=False,
                reasoning="User needs to connect wallet for portfolio analysis",
                recommendations=["Connect wallet to get personalized advice"],
            )

        if portfolio is None or not portfolio.has_sufficient_funds:
            return self.insufficient_funds_response(intent, portfolio)

        return self.swap_response(intent, portfolio, routes, market)

    @staticmethod
    def general_response() -> IntelligentChatResponse:
        return IntelligentChatResponse(
            reply=GENERAL_FALLBACK_REPLY,
            requires_action=False,
            reasoning="Local pipeline only handles swaps; general questions go to the chat API",
        )

    @staticmethod
    def insufficient_funds_response(
        intent: SwapIntent,
        portfolio: Optional[PortfolioAnalysis],
    ) -> IntelligentChatResponse:
        token = intent.from_token
        available = portfolio.total_balance if portfolio else 0.0
        requested = intent.amount
        deficit = requested - available
        recommendations: List[str] = []

        reply = (
            f"I checked your portfolio and found ${available:.2f} {token} available, "
            f"but you're looking to swap ${requested:.2f}. "
        )

        if available > 0:
            reply += "Here are your best options:\n\n"
            reply += f"💡 **Swap Available Amount**: Trade your full ${available:.2f} {token} balance\n"
            recommendations.append(f"Swap {available:.0f} {token} instead")

            if deficit < available * 0.5:
                reply += (
                    f"🌉 **Bridge Additional Funds**: If you have {token} on other chains, "
                    f"bridge ${deficit:.2f} to complete your full swap\n"
                )
                recommendations.append("Check other chains for additional funds")

            reply += f"💰 **Add Funds**: Deposit more {token} to your wallet\n"
            recommendations.append("Add funds to wallet")
        else:
            reply += (
                f"You don't currently have any {token} in your connected wallet. "
                f"You'll need to deposit {token} first."
            )
            recommendations.append(f"Deposit {token} to your wallet")

        if portfolio is not None:
            holdings = [
                f"{chain.balance:.2f} on {chain.chain_name}"
                for chain in portfolio.chain_distribution
                if chain.balance > 0
            ]
            if holdings:
                reply += f"\n\n📊 **Your Current Holdings**: {', '.join(holdings)}"

        return IntelligentChatResponse(
            reply=reply,
            requires_action=False,
            reasoning=f"Insufficient funds: user has {available} but needs {requested}",
            recommendations=recommendations,
        )

    def swap_response(
        self,
        intent: SwapIntent,
        portfolio: PortfolioAnalysis,
        routes: Optional[RouteAnalysis],
        market: MarketSnapshot,
    ) -> IntelligentChatResponse:
        route = routes.recommended_route if routes else None
        output_amount = f"{intent.amount * OUTPUT_RATIO:.4f}"
        risk = portfolio.risk_assessment
        change = market.price_change_24h

        reply = (
            f"I analyzed your portfolio and found ${portfolio.total_balance:.2f} {intent.from_token} "
            f"available across {len(portfolio.chain_distribution)} chains. "
        )

        if change != 0:
            direction = "up" if change > 0 else "down"
            magnitude = abs(change)
            reply += f"{intent.to_token} is {direction} {magnitude:.1f}% today at ${market.current_price:.0f}. "
            if magnitude > 3:
                reply += f"Given the {'significant' if magnitude > 5 else 'notable'} movement, "
                if change > 0:
                    reply += "this could be a good entry point, but consider DCA if you're concerned about a pullback. "
                else:
                    reply += "you might be buying a dip - potentially good timing. "

        if route is not None:
            fees = route.total_cost - route.gas_estimate
            reply += f"\n\nFor the {intent.preference} route, I recommend {route.name}. "
            reply += route.reasoning
            reply += (
                f" Total cost: ${route.total_cost:.2f} ({route.gas_estimate:.2f} gas + {fees:.2f} fees). "
                f"You'll receive approximately {output_amount} {intent.to_token}. "
            )

        risk_warnings: List[str] = []
        market_insights: List[str] = []

        if risk.portfolio_percentage > 25:
            share = f"{risk.portfolio_percentage:.1f}%"
            risk_warnings.append(f"This swap represents {share} of your portfolio")
            reply += f"\n\n⚠️ **Portfolio Impact**: This swap represents {share} of your total portfolio value. "
            if risk.portfolio_percentage > 50:
                reply += "Consider smaller position sizes or DCA strategy. "

        recommendations: List[str] = []
        for rec in portfolio.recommendations:
            recommendations.append(rec.title)
            if rec.savings:
                reply += f"\n💡 {rec.title}: {rec.description} (saves {rec.savings})"

        if market.gas_environment == "high":
            market_insights.append("Gas fees are currently high - consider Layer 2 options")
            reply += "\n⛽ **Gas Alert**: Network fees are elevated. Consider using Layer 2 solutions to save costs. "

        action = self.build_swap_action(intent, portfolio, route, market, output_amount)

        return IntelligentChatResponse(
            reply=reply,
            action_response=action,
            requires_action=True,
            reasoning="Portfolio validated, route analyzed, market conditions considered",
            recommendations=recommendations,
            risk_warnings=risk_warnings,
            market_insights=market_insights,
        )

    @staticmethod
    def build_swap_action(
        intent: SwapIntent,
        portfolio: PortfolioAnalysis,
        route: Optional[RouteOption],
        market: MarketSnapshot,
        output_amount: str,
    ) -> TalkToInvestResponse:
        total_cost = f"{route.total_cost:.2f}" if route else DEFAULT_TOTAL_COST
        minutes = f"{route.execution_time:.0f}" if route else str(DEFAULT_EXECUTION_MINUTES)
        gas_fee = f"{route.gas_estimate:.0f}" if route else DEFAULT_GAS_FEE
        slippage = route.slippage if route else DEFAULT_SLIPPAGE
        change = market.price_change_24h

        top_chain_id = portfolio.chain_distribution[0].chain_id if portfolio.chain_distribution else ETHEREUM
        from_chain_id = intent.from_chain or top_chain_id
        from_chain = chain_name(from_chain_id)
        to_chain = chain_name(intent.to_chain) if intent.to_chain else from_chain

        return TalkToInvestResponse(
            type="swap",
            summary=ActionSummary(
                emoji="💎",
                action=f"Ready to swap {intent.amount:g} {intent.from_token} for ~{output_amount} {intent.to_token}",
                primary_details=f"Cost: ${total_cost} • Time: ~{minutes} min",
            ),
            metrics=[
                ActionMetric(
                    label="Current Price",
                    value=f"${market.current_price:.0f} ({'+' if change > 0 else ''}{change:.1f}%)",
                    status="success" if change > 0 else "warning",
                    emoji="📊",
                ),
                ActionMetric(
                    label="Your Balance",
                    value=f"${portfolio.total_balance:.0f} {intent.from_token}",
                    status="success",
                    emoji="💰",
                ),
                ActionMetric(
                    label="Gas Fee",
                    value=f"${gas_fee}",
                    status="warning" if market.gas_environment == "high" else "success",
                    emoji="⚡",
                ),
                ActionMetric(
                    label="Slippage",
                    value=f"{slippage:.1f}%",
                    status="neutral",
                    emoji="📈",
                ),
            ],
            primary_action=PrimaryAction(
                text=f"Swap {output_amount} {intent.to_token}",
                emoji="🚀",
                disabled=False,
                action_type="swap",
                execution_data=ExecutionData(
                    from_token=intent.from_token,
                    to_token=intent.to_token,
                    from_amount=f"{intent.amount:g}",
                    to_amount=output_amount,
                    route=route.name if route else DEFAULT_ROUTE_NAME,
                    gas_fee=f"${gas_fee}",
                    slippage=slippage,
                    from_chain=from_chain,
                    to_chain=to_chain,
                    chain_id=from_chain_id,
                    estimated_gas=route.gas_estimate if route else None,
                    estimated_time=route.execution_time if route else None,
                ),
            ),
            confidence=route.confidence if route else DEFAULT_CONFIDENCE,
        )
