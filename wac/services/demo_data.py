"""
Hardcoded demo payloads served while the backend is unreachable.

Each helper builds fresh models so callers may mutate what they get back.
"""

import time
from typing import Dict, List, Optional

from ..types.backend import (
    Bot,
    BotPerformance,
    BotPerformanceResponse,
    BotRiskMetrics,
    BotsResponse,
    BotToggleResponse,
    Challenge,
    ChallengeCompleteResponse,
    ChallengesResponse,
    DailyRewardResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    PortfolioAsset,
    PortfolioResponse,
    PortfolioSummary,
    PricesResponse,
    ProfitPoint,
    ThreadListResponse,
    TokenPrice,
    TrendingResponse,
    TrendingToken,
    UserProgress,
    UserProgressResponse,
)

XP_PER_LEVEL = 1000
DAILY_REWARD = "5"
DAILY_REWARD_XP = 50

_BOTS = [
    {
        "id": "arbitrage-bot",
        "name": "Arbitrage Bot",
        "status": "active",
        "description": "Automatically identifies and executes arbitrage opportunities across multiple DEXs",
        "icon": "trending-up",
        "profit": "+$1,245.67",
        "trades": 23,
        "category": "arbitrage",
    },
    {
        "id": "price-impact-tracker",
        "name": "Price Impact Tracker",
        "status": "active",
        "description": "Monitors price impact on large trades and suggests optimal execution strategies",
        "icon": "bar-chart",
        "profit": "+$892.34",
        "trades": 15,
        "category": "price-impact",
    },
    {
        "id": "twap-bot",
        "name": "TWAP Bot",
        "status": "active",
        "description": "Time-Weighted Average Price execution for large orders to minimize market impact",
        "icon": "activity",
        "profit": "+$567.89",
        "trades": 8,
        "category": "twap",
    },
    {
        "id": "mev-protection-bot",
        "name": "MEV Protection Bot",
        "status": "paused",
        "description": "Protects against MEV attacks and front-running on high-value transactions",
        "icon": "zap",
        "profit": "+$234.12",
        "trades": 3,
        "category": "mev-protection",
    },
]

_CHALLENGES = [
    {
        "id": "first-swap",
        "title": "Make Your First Swap",
        "description": "Swap any token on a supported DEX",
        "reward": "10",
        "xpReward": 100,
        "difficulty": "beginner",
        "requirements": ["Connect a wallet", "Complete one swap"],
        "category": "trading",
    },
    {
        "id": "bridge-explorer",
        "title": "Bridge Explorer",
        "description": "Move funds to a Layer 2 network",
        "reward": "25",
        "xpReward": 250,
        "difficulty": "intermediate",
        "requirements": ["Bridge at least $10 to Arbitrum, Optimism or Base"],
        "category": "bridging",
        "unlockLevel": 2,
    },
    {
        "id": "yield-hunter",
        "title": "Yield Hunter",
        "description": "Provide liquidity to a pool for seven days",
        "reward": "75",
        "xpReward": 600,
        "difficulty": "advanced",
        "requirements": ["Add liquidity to any pool", "Keep the position open for 7 days"],
        "category": "defi",
        "unlockLevel": 5,
        "timeLimit": 604800,
    },
]

_PRICES = {
    "ETH": {"name": "Ethereum", "price": 1600.0, "change24h": 24.5, "changePercent": 1.55},
    "BTC": {"name": "Bitcoin", "price": 30000.0, "change24h": -210.0, "changePercent": -0.7},
    "USDC": {"name": "USD Coin", "price": 1.0, "change24h": 0.0, "changePercent": 0.0},
    "USDT": {"name": "Tether", "price": 1.0, "change24h": 0.0, "changePercent": 0.0},
    "MATIC": {"name": "Polygon", "price": 0.55, "change24h": 0.01, "changePercent": 1.9},
    "ARB": {"name": "Arbitrum", "price": 0.95, "change24h": -0.02, "changePercent": -2.1},
    "OP": {"name": "Optimism", "price": 1.35, "change24h": 0.04, "changePercent": 3.1},
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def bots(category: Optional[str] = None) -> BotsResponse:
    now = _now_ms()
    items = [
        Bot.model_validate({**bot, "createdAt": now, "updatedAt": now})
        for bot in _BOTS
        if category is None or bot["category"] == category
    ]
    return BotsResponse(bots=items, count=len(items), demo=True)


def bot_toggle(bot_id: str) -> BotToggleResponse:
    for bot in bots().bots:
        if bot.id == bot_id:
            status = "paused" if bot.status == "active" else "active"
            return BotToggleResponse(bot=bot.model_copy(update={"status": status}), demo=True)
    return BotToggleResponse(success=False, bot=None, demo=True)


def bot_performance(bot_id: str) -> BotPerformanceResponse:
    bot = next((b for b in _BOTS if b["id"] == bot_id), _BOTS[0])
    now = _now_ms()
    day_ms = 24 * 60 * 60 * 1000
    history = [
        ProfitPoint(timestamp=now - (6 - day) * day_ms, value=f"{(day + 1) * 42.5:.2f}")
        for day in range(7)
    ]
    performance = BotPerformance(
        bot_id=bot_id,
        profit=bot["profit"],
        trades=bot["trades"],
        success_rate=0.87,
        profit_history=history,
        risk_metrics=BotRiskMetrics(max_drawdown="-4.2%", sharpe_ratio=1.8, volatility="12.5%"),
    )
    return BotPerformanceResponse(performance=performance, demo=True)


def user_progress(address: str) -> UserProgressResponse:
    xp = 1450
    progress = UserProgress(
        wallet_address=address,
        level=xp // XP_PER_LEVEL + 1,
        total_rewards="35",
        completed_challenges=["first-swap"],
        current_stage=2,
        xp=xp,
        streak_days=3,
        last_active_date=_now_ms(),
        achievements=["early-adopter"],
    )
    return UserProgressResponse(
        progress=progress,
        next_level_xp=(progress.level) * XP_PER_LEVEL,
        current_level_progress=(xp % XP_PER_LEVEL) / XP_PER_LEVEL * 100,
        demo=True,
    )


def challenges(
    difficulty: Optional[str] = None,
    category: Optional[str] = None,
    completed: Optional[bool] = None,
) -> ChallengesResponse:
    items = [Challenge.model_validate(c) for c in _CHALLENGES]
    if difficulty:
        items = [c for c in items if c.difficulty == difficulty]
    if category:
        items = [c for c in items if c.category == category]
    if completed is not None:
        items = [c for c in items if c.completed == completed]
    return ChallengesResponse(challenges=items, count=len(items), demo=True)


def challenge_complete(challenge_id: str) -> ChallengeCompleteResponse:
    challenge = next((c for c in _CHALLENGES if c["id"] == challenge_id), None)
    if challenge is None:
        return ChallengeCompleteResponse(success=False, challenge_id=challenge_id, demo=True)
    return ChallengeCompleteResponse(
        challenge_id=challenge_id,
        xp_earned=challenge["xpReward"],
        reward=challenge["reward"],
        demo=True,
    )


def daily_reward() -> DailyRewardResponse:
    return DailyRewardResponse(reward=DAILY_REWARD, xp_earned=DAILY_REWARD_XP, streak_days=1, demo=True)


def leaderboard(limit: int = 10) -> LeaderboardResponse:
    entries = [
        LeaderboardEntry(
            rank=rank,
            wallet_address=f"0x{rank:040x}",
            level=max(1, 12 - rank),
            total_rewards=str(500 - rank * 35),
            xp=12000 - rank * 900,
            challenges_completed=max(0, 20 - rank * 2),
        )
        for rank in range(1, 11)
    ]
    return LeaderboardResponse(leaderboard=entries[:limit], demo=True)


def prices(symbols: List[str], chain_id: int = 1) -> PricesResponse:
    now = _now_ms()
    result: Dict[str, TokenPrice] = {}
    for symbol in symbols:
        entry = _PRICES.get(symbol.upper())
        if entry is None:
            continue
        result[symbol] = TokenPrice.model_validate({"symbol": symbol.upper(), "lastUpdated": now, **entry})
    return PricesResponse(prices=result, chain_id=chain_id, demo=True)


def trending(limit: int = 10) -> TrendingResponse:
    ranked = sorted(_PRICES.items(), key=lambda kv: kv[1]["changePercent"], reverse=True)
    tokens = [
        TrendingToken(
            rank=rank,
            symbol=symbol,
            name=entry["name"],
            price=entry["price"],
            change_percent=entry["changePercent"],
            volume_24h=0.0,
            market_cap=0.0,
        )
        for rank, (symbol, entry) in enumerate(ranked, start=1)
    ]
    return TrendingResponse(trending=tokens[:limit], demo=True)


def portfolio(address: str) -> PortfolioResponse:
    assets = [
        PortfolioAsset(symbol="ETH", name="Ethereum", balance=1.2, price=1600.0, value=1920.0, chain_id=1),
        PortfolioAsset(symbol="USDC", name="USD Coin", balance=850.0, price=1.0, value=850.0, chain_id=42161, decimals=6),
        PortfolioAsset(symbol="USDC", name="USD Coin", balance=300.0, price=1.0, value=300.0, chain_id=137, decimals=6),
    ]
    total = sum(asset.value for asset in assets)
    summary = PortfolioSummary(
        total_value=total,
        active_assets=len(assets),
        last_updated=_now_ms(),
    )
    return PortfolioResponse(summary=summary, assets=assets, demo=True)


def threads() -> ThreadListResponse:
    return ThreadListResponse(threads=[], demo=True)
