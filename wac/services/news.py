"""
Synthetic market news feed.

Items are generated from per-category headline templates with randomized
figures and cached for five minutes. If generation fails the static fallback
list is served instead.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..cache import TTLCache
from ..types.news import NewsItem

logger = logging.getLogger(__name__)

NEWS_CACHE_TTL_SECONDS = 300
MAX_AGE_HOURS = 5
HOUR_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class TemplateGroup:
    category: str
    source: str
    base_url: str
    templates: Tuple[str, ...]


TEMPLATE_GROUPS: Tuple[TemplateGroup, ...] = (
    TemplateGroup(
        category="Bitcoin",
        source="CoinDesk",
        base_url="https://www.coindesk.com/markets/bitcoin/",
        templates=(
            "Bitcoin Shows Strong Momentum Above $",
            "BTC Consolidates Around $",
            "Bitcoin Tests Resistance at $",
        ),
    ),
    TemplateGroup(
        category="Ethereum",
        source="Etherscan",
        base_url="https://etherscan.io/gasTracker",
        templates=(
            "Ethereum Gas Fees Drop to ",
            "ETH Staking Rewards Increase to ",
            "Ethereum Layer 2 Activity Surges",
        ),
    ),
    TemplateGroup(
        category="DeFi",
        source="DeFi Pulse",
        base_url="https://defipulse.com/",
        templates=(
            "DeFi TVL Reaches $",
            "Total Value Locked in DeFi Protocols Shows ",
            "DeFi Yield Farming APYs Average ",
        ),
    ),
    TemplateGroup(
        category="Regulation",
        source="CoinTelegraph",
        base_url="https://cointelegraph.com/tags/regulation",
        templates=(
            "SEC Updates Crypto Regulatory Framework",
            "New Crypto Legislation Proposed in ",
            "Regulatory Clarity Improves for ",
        ),
    ),
    TemplateGroup(
        category="DEX",
        source="The Block",
        base_url="https://www.theblock.co/data/decentralized-finance",
        templates=(
            "Major DEX Launches New ",
            "Uniswap V4 Features Attract ",
            "Cross-chain Bridge Volume Hits $",
        ),
    ),
)

COUNTRIES = ("US", "EU", "UK", "Japan", "Singapore")
DEX_FEATURES = ("Limit Orders", "Perpetuals", "Options", "Cross-chain Swaps")


def fallback_news(now_ms: Optional[int] = None) -> List[NewsItem]:
    """Static headlines served when the generator or the backend fails."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return [
        NewsItem(
            id="fallback-1",
            title="Crypto Market Shows Strong Recovery",
            description="Major cryptocurrencies posting gains as market sentiment improves",
            trend="up",
            percentage="+3.5%",
            timestamp=now_ms - 2 * HOUR_MS,
            source="Market Watch",
            category="Market",
        ),
        NewsItem(
            id="fallback-2",
            title="DeFi TVL Reaches New Milestone",
            description="Total value locked in DeFi protocols surpasses previous highs",
            trend="up",
            percentage="+8.2%",
            timestamp=now_ms - 4 * HOUR_MS,
            source="DeFi Pulse",
            category="DeFi",
        ),
        NewsItem(
            id="fallback-3",
            title="Ethereum Gas Fees at Monthly Low",
            description="Network congestion eases as Layer 2 adoption increases",
            trend="down",
            percentage="-15%",
            timestamp=now_ms - 6 * HOUR_MS,
            source="Etherscan",
            category="Ethereum",
        ),
    ]


class NewsService:
    """Generates and caches market headlines."""

    def __init__(
        self,
        *,
        cache: Optional[TTLCache] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        ttl_seconds: int = NEWS_CACHE_TTL_SECONDS,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache = cache or TTLCache(default_ttl=ttl_seconds, clock=clock)
        self._rng = rng or random.Random()

    @staticmethod
    def _cache_key(limit: int) -> str:
        return f"news:{limit}"

    async def fetch_latest_news(
        self,
        limit: int = 10,
        *,
        category: Optional[str] = None,
        trend: Optional[str] = None,
    ) -> List[NewsItem]:
        key = self._cache_key(limit)
        items = await self._cache.get(key)
        if items is None:
            try:
                items = self.generate(limit)
            except Exception as e:
                logger.error(f"Error generating news: {e}", exc_info=True)
                return self._filter(fallback_news(self._now_ms()), category, trend)
            await self._cache.purge_expired()
            await self._cache.set(key, items, ttl=self.ttl_seconds)
            logger.info(f"Generated {len(items)} news items")
        else:
            logger.debug("Returning cached news")

        return self._filter(items, category, trend)

    async def clear_cache(self) -> None:
        await self._cache.clear()
        logger.info("News cache cleared")

    @staticmethod
    def _filter(items: List[NewsItem], category: Optional[str], trend: Optional[str]) -> List[NewsItem]:
        if category:
            items = [item for item in items if (item.category or "").lower() == category.lower()]
        if trend:
            items = [item for item in items if item.trend == trend]
        return list(items)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def generate(self, limit: int) -> List[NewsItem]:
        now = self._now_ms()
        count = min(limit, len(TEMPLATE_GROUPS) * 2)
        news = [self._generate_item(TEMPLATE_GROUPS[i % len(TEMPLATE_GROUPS)], i, now) for i in range(count)]
        news.sort(key=lambda item: item.timestamp, reverse=True)
        return news[:limit]

    def _generate_item(self, group: TemplateGroup, index: int, now: int) -> NewsItem:
        rng = self._rng
        template = rng.choice(group.templates)

        btc_price = 95000 + rng.randrange(10000)
        percent_change = round(rng.random() * 10 - 5, 1)
        if percent_change > 0:
            trend = "up"
        elif percent_change < 0:
            trend = "down"
        else:
            trend = "neutral"
        up = trend == "up"

        title, description = self._render(group.category, template, rng, btc_price, percent_change, up)

        age_ms = rng.random() * MAX_AGE_HOURS * HOUR_MS
        percentage = None
        if trend != "neutral":
            percentage = f"{'+' if up else ''}{percent_change:.1f}%"

        return NewsItem(
            id=f"news-{now}-{index}",
            title=title,
            description=description,
            trend=trend,
            percentage=percentage,
            timestamp=int(now - age_ms),
            source=group.source,
            category=group.category,
            url=group.base_url,
        )

    @staticmethod
    def _render(
        category: str,
        template: str,
        rng: random.Random,
        btc_price: int,
        percent_change: float,
        up: bool,
    ) -> Tuple[str, str]:
        if category == "Bitcoin":
            title = f"{template}{btc_price:,}"
            description = (
                f"Bitcoin {'rallies' if up else 'dips'} as institutional interest "
                f"{'grows' if up else 'wanes'}. Trading volume reaches "
                f"${20 + rng.random() * 30:.1f}B in 24h."
            )
        elif category == "Ethereum":
            if "Gas Fees" in template:
                gwei = 15 + rng.randrange(20)
                congested = gwei > 25
                title = f"{template}{gwei} Gwei"
                description = (
                    f"Network congestion {'increases' if congested else 'eases'} as Layer 2 adoption "
                    f"{'lags' if congested else 'accelerates'}. Average transaction cost: ${gwei * 0.15:.2f}."
                )
            elif "Staking" in template:
                apy = 4.5 + rng.random() * 2
                title = f"{template}{apy:.1f}% APY"
                description = (
                    "Ethereum staking yields remain attractive as network security strengthens. "
                    f"Over {32 + rng.random() * 10:.1f}M ETH currently staked."
                )
            else:
                title = f"{template} by {10 + rng.randrange(30)}%"
                description = "Optimism and Arbitrum lead growth as gas fees on mainnet push users to L2 solutions."
        elif category == "DeFi":
            tvl = 45 + rng.randrange(20)
            if "TVL" in template:
                title = f"{template}{tvl}B Milestone"
                description = (
                    f"DeFi protocols {'attract fresh capital' if up else 'see outflows'} as yields "
                    f"{'improve' if up else 'compress'}. Lending protocols dominate with "
                    f"{30 + rng.random() * 20:.0f}% market share."
                )
            else:
                title = f"{template}{'Growth' if up else 'Decline'} of {abs(percent_change):g}%"
                description = (
                    f"Market {'optimism' if up else 'caution'} drives DeFi activity. "
                    "Blue-chip protocols maintain dominance."
                )
        elif category == "Regulation":
            country = rng.choice(COUNTRIES)
            title = f"{template}{country}" if template.endswith(("in ", "for ")) else template
            description = (
                f"{country} regulators {'provide clarity' if up else 'express concerns'} on digital asset "
                f"frameworks. Industry {'welcomes' if up else 'awaits'} further guidance."
            )
        else:
            feature = rng.choice(DEX_FEATURES)
            if template.endswith("New "):
                title = f"{template}{feature} Feature"
            elif template.endswith("$"):
                title = f"{template}{1 + rng.random() * 3:.1f}B"
            else:
                title = f"{template}{10 + rng.randrange(90)}K Traders"
            description = (
                f"Decentralized exchange innovation continues with enhanced {feature.lower()} "
                f"functionality. Daily volume exceeds ${1 + rng.random() * 3:.1f}B."
            )
        return title.strip(), description
