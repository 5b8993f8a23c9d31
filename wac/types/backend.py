"""
Response variants for every backend endpoint.

Payloads are validated at the client boundary; anything that does not match
raises ``BackendPayloadError`` instead of leaking untyped dicts downstream.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import CamelModel
from .news import NewsItem
from .talk_to_invest import ActionType, TalkToInvestResponse


class BackendModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BackendResponse(BackendModel):
    success: bool = True
    demo: bool = Field(default=False, description="Served from hardcoded demo data")


# Chat

class BackendChatResponse(BackendModel):
    reply: str
    parsed_intent: Optional[Any] = None
    thread_id: Optional[str] = None
    thread_title: Optional[str] = None
    action_response: Optional[TalkToInvestResponse] = Field(default=None, alias="actionResponse")
    requires_action: bool = Field(default=False, alias="requiresAction")
    action_type: Optional[ActionType] = Field(default=None, alias="actionType")


class RemoteThread(BackendModel):
    id: str
    title: str = ""
    wallet_address: Optional[str] = None
    created_at: int = 0
    updated_at: int = 0
    message_count: int = 0
    last_message: str = ""
    category: Optional[str] = None


class RemoteThreadMessage(BackendModel):
    id: str
    thread_id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: int
    wallet_address: Optional[str] = None


class ThreadListResponse(BackendResponse):
    threads: List[RemoteThread] = Field(default_factory=list)


class ThreadDetailResponse(BackendResponse):
    thread: RemoteThread
    messages: List[RemoteThreadMessage] = Field(default_factory=list)


class DeleteAck(BackendResponse):
    message: Optional[str] = None


# Portfolio

class PortfolioAsset(CamelModel):
    symbol: str
    name: str = ""
    balance: float = 0.0
    value: float = 0.0
    change_24h: float = 0.0
    change_percent: float = 0.0
    chain_id: int = 1
    contract_address: Optional[str] = None
    price: float = 0.0
    decimals: int = 18


class PortfolioSummary(CamelModel):
    total_value: float = 0.0
    change_24h: float = 0.0
    change_percent: float = 0.0
    active_assets: int = 0
    volume_24h: float = 0.0
    last_updated: int = 0


class PortfolioResponse(BackendResponse):
    summary: PortfolioSummary = Field(default_factory=PortfolioSummary)
    assets: List[PortfolioAsset] = Field(default_factory=list)


# Market

class TokenPrice(CamelModel):
    symbol: str
    name: str = ""
    price: float = 0.0
    change_24h: float = 0.0
    change_percent: float = 0.0
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    last_updated: int = 0


class PricesResponse(BackendResponse):
    prices: Dict[str, TokenPrice] = Field(default_factory=dict)
    chain_id: int = Field(default=1, alias="chainId")


class NewsResponse(BackendResponse):
    news: List[NewsItem] = Field(default_factory=list)
    count: int = 0


class TrendingToken(CamelModel):
    rank: int
    symbol: str
    name: str = ""
    price: float = 0.0
    change_percent: float = 0.0
    volume_24h: float = 0.0
    market_cap: float = 0.0


class TrendingResponse(BackendResponse):
    trending: List[TrendingToken] = Field(default_factory=list)


# Bots

class Bot(CamelModel):
    id: str
    name: str
    status: Literal["active", "paused"]
    description: str = ""
    icon: str = ""
    profit: str = "0"
    trades: int = 0
    category: Literal["arbitrage", "price-impact", "twap", "mev-protection"]
    created_at: int = 0
    updated_at: int = 0


class BotsResponse(BackendResponse):
    bots: List[Bot] = Field(default_factory=list)
    count: int = 0


class BotToggleResponse(BackendResponse):
    bot: Optional[Bot] = None


class ProfitPoint(CamelModel):
    timestamp: int
    value: str


class BotRiskMetrics(CamelModel):
    max_drawdown: str
    sharpe_ratio: float
    volatility: str


class BotPerformance(CamelModel):
    bot_id: str
    profit: str
    trades: int
    success_rate: float
    profit_history: List[ProfitPoint] = Field(default_factory=list)
    risk_metrics: BotRiskMetrics


class BotPerformanceResponse(BackendResponse):
    performance: BotPerformance


# Play-to-earn

class UserProgress(CamelModel):
    wallet_address: str
    level: int = 1
    total_rewards: str = "0"
    completed_challenges: List[str] = Field(default_factory=list)
    current_stage: int = 1
    xp: int = 0
    streak_days: int = 0
    last_active_date: int = 0
    achievements: List[str] = Field(default_factory=list)


class UserProgressResponse(BackendResponse):
    progress: UserProgress
    next_level_xp: int = Field(default=0, alias="nextLevelXp")
    current_level_progress: float = Field(default=0.0, alias="currentLevelProgress")


class Challenge(CamelModel):
    id: str
    title: str
    description: str = ""
    reward: str = "0"
    xp_reward: int = 0
    difficulty: Literal["beginner", "intermediate", "advanced"] = "beginner"
    completed: bool = False
    requirements: List[str] = Field(default_factory=list)
    category: str = "general"
    unlock_level: Optional[int] = None
    time_limit: Optional[int] = None


class ChallengesResponse(BackendResponse):
    challenges: List[Challenge] = Field(default_factory=list)
    count: int = 0


class ChallengeCompleteResponse(BackendResponse):
    challenge_id: Optional[str] = Field(default=None, alias="challengeId")
    xp_earned: int = Field(default=0, alias="xpEarned")
    reward: Optional[str] = None


class DailyRewardResponse(BackendResponse):
    reward: str = "0"
    xp_earned: int = Field(default=0, alias="xpEarned")
    streak_days: int = Field(default=0, alias="streakDays")


class LeaderboardEntry(CamelModel):
    rank: int
    wallet_address: str
    level: int = 1
    total_rewards: str = "0"
    xp: int = 0
    challenges_completed: int = 0


class LeaderboardResponse(BackendResponse):
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)


# Request bodies accepted by the served API and forwarded to the backend


class WalletRequest(CamelModel):
    wallet_address: Optional[str] = None


class ChallengeCompleteRequest(WalletRequest):
    proof: Optional[Any] = None
