"""
Async client for the wac backend API (portfolio, market, bots, gamification, chat).

Every method returns a validated response model. Failures raise the
``BackendError`` hierarchy; callers decide whether to degrade to demo data.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..types.backend import (
    BackendChatResponse,
    BotPerformanceResponse,
    BotsResponse,
    BotToggleResponse,
    ChallengeCompleteResponse,
    ChallengesResponse,
    DailyRewardResponse,
    DeleteAck,
    LeaderboardResponse,
    NewsResponse,
    PortfolioResponse,
    PricesResponse,
    ThreadDetailResponse,
    ThreadListResponse,
    TrendingResponse,
    UserProgressResponse,
)
from .errors import (
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class ApiStatus:
    """Availability of the backend as last observed by any client call."""

    available: bool = True
    last_error: Optional[str] = None
    checked_at: Optional[float] = None

    @property
    def demo_mode(self) -> bool:
        return not self.available

    def mark_available(self) -> None:
        if not self.available:
            logger.info("Backend reachable again, leaving demo mode")
        self.available = True
        self.last_error = None
        self.checked_at = time.time()

    def mark_unavailable(self, reason: str) -> None:
        if self.available:
            logger.warning(f"Backend unavailable, entering demo mode: {reason}")
        self.available = False
        self.last_error = reason
        self.checked_at = time.time()

    def reset(self) -> None:
        self.available = True
        self.last_error = None
        self.checked_at = None


def _csv(values: Optional[List[str]]) -> Optional[str]:
    if not values:
        return None
    return ",".join(values)


def _clean(params: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


class BackendClient:
    """
    Typed client for the backend HTTP API.

    Transport failures and 5xx responses flip the shared ``ApiStatus`` into
    demo mode; any successful response flips it back. 4xx responses mean the
    backend is up and only raise.
    """

    name = "backend"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        status: Optional[ApiStatus] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.status = status or ApiStatus()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        model: Type[M],
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> M:
        if not self.configured:
            raise BackendUnavailableError("Backend URL is not configured")

        client = self._get_client()
        try:
            response = await client.request(
                method,
                path,
                params=_clean(params or {}),
                json=json,
            )
        except httpx.RequestError as e:
            self.status.mark_unavailable(f"{method} {path}: {e.__class__.__name__}")
            raise BackendUnavailableError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            if response.status_code >= 500:
                self.status.mark_unavailable(f"{method} {path}: HTTP {response.status_code}")
            else:
                self.status.mark_available()
            raise BackendResponseError(message, status_code=response.status_code)

        self.status.mark_available()

        try:
            data = response.json()
        except ValueError as e:
            raise BackendPayloadError(f"{method} {path} returned invalid JSON") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unexpected payload from {method} {path}: {e.error_count()} validation errors")
            raise BackendPayloadError(f"{method} {path} returned an unexpected payload") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"API Error: {response.status_code}"

    # Chat

    async def chat(
        self,
        user_prompt: str,
        *,
        system_prompt: Optional[str] = None,
        thread_id: Optional[str] = None,
        wallet_address: Optional[str] = None,
    ) -> BackendChatResponse:
        payload: Dict[str, Any] = {"user_prompt": user_prompt}
        if system_prompt:
            payload["system_prompt"] = system_prompt
        if thread_id:
            payload["thread_id"] = thread_id
        if wallet_address:
            payload["wallet_address"] = wallet_address
        return await self._request("POST", "/chat", BackendChatResponse, json=payload)

    async def list_threads(self, wallet_address: Optional[str] = None) -> ThreadListResponse:
        return await self._request(
            "GET", "/chat-threads", ThreadListResponse,
            params={"wallet_address": wallet_address},
        )

    async def get_thread(self, thread_id: str) -> ThreadDetailResponse:
        return await self._request("GET", f"/chat-thread/{thread_id}", ThreadDetailResponse)

    async def delete_thread(self, thread_id: str) -> DeleteAck:
        return await self._request("DELETE", f"/chat-thread/{thread_id}", DeleteAck)

    # Portfolio

    async def get_portfolio(
        self,
        address: str,
        *,
        chains: Optional[str] = None,
        refresh: bool = False,
    ) -> PortfolioResponse:
        return await self._request(
            "GET", f"/portfolio/{address}", PortfolioResponse,
            params={"chains": chains, "refresh": True if refresh else None},
        )

    # Market

    async def get_prices(self, symbols: List[str], chain_id: int = 1) -> PricesResponse:
        return await self._request(
            "GET", "/market/prices", PricesResponse,
            params={"symbols": _csv(symbols), "chainId": chain_id},
        )

    async def get_news(
        self,
        *,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        trend: Optional[str] = None,
    ) -> NewsResponse:
        return await self._request(
            "GET", "/market/news", NewsResponse,
            params={"limit": limit, "category": category, "trend": trend},
        )

    async def get_trending(self, chain_id: int = 1, limit: int = 10) -> TrendingResponse:
        return await self._request(
            "GET", "/market/trending", TrendingResponse,
            params={"chainId": chain_id, "limit": limit},
        )

    # Bots

    async def list_bots(
        self,
        *,
        wallet_address: Optional[str] = None,
        category: Optional[str] = None,
    ) -> BotsResponse:
        return await self._request(
            "GET", "/bots", BotsResponse,
            params={"wallet_address": wallet_address, "category": category},
        )

    async def toggle_bot(self, bot_id: str, wallet_address: Optional[str] = None) -> BotToggleResponse:
        return await self._request(
            "POST", f"/bots/{bot_id}/toggle", BotToggleResponse,
            json={"wallet_address": wallet_address},
        )

    async def get_bot_performance(
        self,
        bot_id: str,
        wallet_address: Optional[str] = None,
    ) -> BotPerformanceResponse:
        return await self._request(
            "GET", f"/bots/{bot_id}/performance", BotPerformanceResponse,
            params={"wallet_address": wallet_address},
        )

    # Play-to-earn

    async def get_user_progress(self, address: str) -> UserProgressResponse:
        return await self._request("GET", f"/user/progress/{address}", UserProgressResponse)

    async def list_challenges(
        self,
        *,
        difficulty: Optional[str] = None,
        category: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> ChallengesResponse:
        return await self._request(
            "GET", "/challenges", ChallengesResponse,
            params={"difficulty": difficulty, "category": category, "completed": completed},
        )

    async def complete_challenge(
        self,
        challenge_id: str,
        wallet_address: Optional[str] = None,
        proof: Optional[Any] = None,
    ) -> ChallengeCompleteResponse:
        return await self._request(
            "POST", f"/challenges/{challenge_id}/complete", ChallengeCompleteResponse,
            json={"walletAddress": wallet_address, "proof": proof},
        )

    async def claim_daily_reward(self, wallet_address: Optional[str] = None) -> DailyRewardResponse:
        return await self._request(
            "POST", "/daily-reward", DailyRewardResponse,
            json={"walletAddress": wallet_address},
        )

    async def get_leaderboard(self, board_type: str = "xp", limit: int = 10) -> LeaderboardResponse:
        return await self._request(
            "GET", "/leaderboard", LeaderboardResponse,
            params={"type": board_type, "limit": limit},
        )
