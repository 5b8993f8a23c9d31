"""Backend access with graceful degradation to demo data."""

from __future__ import annotations

import logging
from typing import Any, Callable, Awaitable, List, Optional, TypeVar

from ..providers.backend import ApiStatus, BackendClient
from ..providers.errors import BackendError, BackendResponseError
from ..types.backend import (
    BotPerformanceResponse,
    BotsResponse,
    BotToggleResponse,
    ChallengeCompleteResponse,
    ChallengesResponse,
    DailyRewardResponse,
    LeaderboardResponse,
    NewsResponse,
    PortfolioResponse,
    PricesResponse,
    TrendingResponse,
    UserProgressResponse,
)
from . import demo_data
from .news import fallback_news

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackendGateway:
    """
    Wraps `BackendClient` so every call either returns live data or demo data.

    Client errors (4xx) are propagated since they describe the request, not the
    backend's health. Everything else degrades to the matching demo payload
    when `enable_demo_fallback` is set.
    """

    def __init__(self, client: BackendClient, *, enable_demo_fallback: bool = True) -> None:
        self.client = client
        self.enable_demo_fallback = enable_demo_fallback

    @property
    def status(self) -> ApiStatus:
        return self.client.status

    @property
    def demo_mode(self) -> bool:
        return self.client.status.demo_mode

    async def _call(
        self,
        label: str,
        call: Callable[[], Awaitable[T]],
        fallback: Callable[[], T],
    ) -> T:
        try:
            return await call()
        except BackendResponseError as e:
            if not e.is_server_error:
                raise
            error: BackendError = e
        except BackendError as e:
            error = e

        if not self.enable_demo_fallback:
            raise error
        logger.info(f"Serving demo data for {label}: {error}")
        return fallback()

    async def get_portfolio(self, address: str, *, chains: Optional[str] = None, refresh: bool = False) -> PortfolioResponse:
        return await self._call(
            "portfolio",
            lambda: self.client.get_portfolio(address, chains=chains, refresh=refresh),
            lambda: demo_data.portfolio(address),
        )

    async def get_prices(self, symbols: List[str], chain_id: int = 1) -> PricesResponse:
        return await self._call(
            "prices",
            lambda: self.client.get_prices(symbols, chain_id),
            lambda: demo_data.prices(symbols, chain_id),
        )

    async def get_news(self, *, limit: Optional[int] = None, category: Optional[str] = None, trend: Optional[str] = None) -> NewsResponse:
        def fallback() -> NewsResponse:
            items = fallback_news()
            if category:
                items = [item for item in items if item.category == category]
            if trend:
                items = [item for item in items if item.trend == trend]
            if limit:
                items = items[:limit]
            return NewsResponse(news=items, count=len(items), demo=True)

        return await self._call(
            "news",
            lambda: self.client.get_news(limit=limit, category=category, trend=trend),
            fallback,
        )

    async def get_trending(self, chain_id: int = 1, limit: int = 10) -> TrendingResponse:
        return await self._call(
            "trending",
            lambda: self.client.get_trending(chain_id, limit),
            lambda: demo_data.trending(limit),
        )

    async def list_bots(self, *, wallet_address: Optional[str] = None, category: Optional[str] = None) -> BotsResponse:
        return await self._call(
            "bots",
            lambda: self.client.list_bots(wallet_address=wallet_address, category=category),
            lambda: demo_data.bots(category),
        )

    async def toggle_bot(self, bot_id: str, wallet_address: Optional[str] = None) -> BotToggleResponse:
        return await self._call(
            "bot toggle",
            lambda: self.client.toggle_bot(bot_id, wallet_address),
            lambda: demo_data.bot_toggle(bot_id),
        )

    async def get_bot_performance(self, bot_id: str, wallet_address: Optional[str] = None) -> BotPerformanceResponse:
        return await self._call(
            "bot performance",
            lambda: self.client.get_bot_performance(bot_id, wallet_address),
            lambda: demo_data.bot_performance(bot_id),
        )

    async def get_user_progress(self, address: str) -> UserProgressResponse:
        return await self._call(
            "user progress",
            lambda: self.client.get_user_progress(address),
            lambda: demo_data.user_progress(address),
        )

    async def list_challenges(
        self,
        *,
        difficulty: Optional[str] = None,
        category: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> ChallengesResponse:
        return await self._call(
            "challenges",
            lambda: self.client.list_challenges(difficulty=difficulty, category=category, completed=completed),
            lambda: demo_data.challenges(difficulty, category, completed),
        )

    async def complete_challenge(
        self,
        challenge_id: str,
        wallet_address: Optional[str] = None,
        proof: Optional[Any] = None,
    ) -> ChallengeCompleteResponse:
        return await self._call(
            "challenge completion",
            lambda: self.client.complete_challenge(challenge_id, wallet_address, proof),
            lambda: demo_data.challenge_complete(challenge_id),
        )

    async def claim_daily_reward(self, wallet_address: Optional[str] = None) -> DailyRewardResponse:
        return await self._call(
            "daily reward",
            lambda: self.client.claim_daily_reward(wallet_address),
            demo_data.daily_reward,
        )

    async def get_leaderboard(self, board_type: str = "xp", limit: int = 10) -> LeaderboardResponse:
        return await self._call(
            "leaderboard",
            lambda: self.client.get_leaderboard(board_type, limit),
            lambda: demo_data.leaderboard(limit),
        )
