from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..types.backend import NewsResponse, PortfolioResponse, PricesResponse, TrendingResponse
from .deps import get_context

router = APIRouter()

Trend = Literal["up", "down", "neutral"]


@router.get("/news")
async def latest_news(
    limit: int = Query(default=10, ge=1, le=50),
    category: Optional[str] = None,
    trend: Optional[Trend] = None,
    ctx: AppContext = Depends(get_context),
) -> NewsResponse:
    """Generated market headlines, cached per limit"""
    items = await ctx.news.fetch_latest_news(limit, category=category, trend=trend)
    return NewsResponse(news=items, count=len(items))


@router.post("/news/refresh")
async def refresh_news(
    limit: int = Query(default=10, ge=1, le=50),
    ctx: AppContext = Depends(get_context),
) -> NewsResponse:
    await ctx.news.clear_cache()
    items = await ctx.news.fetch_latest_news(limit)
    return NewsResponse(news=items, count=len(items))


@router.get("/market/news")
async def backend_news(
    limit: Optional[int] = Query(default=None, ge=1),
    category: Optional[str] = None,
    trend: Optional[Trend] = None,
    ctx: AppContext = Depends(get_context),
) -> NewsResponse:
    """News as served by the backend, falling back to the built-in headlines"""
    return await ctx.gateway.get_news(limit=limit, category=category, trend=trend)


@router.get("/market/prices")
async def market_prices(
    symbols: str = Query(default="ETH,BTC,USDC", description="Comma separated token symbols"),
    chain_id: int = Query(default=1, alias="chainId"),
    ctx: AppContext = Depends(get_context),
) -> PricesResponse:
    requested = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    return await ctx.market.prices(requested, chain_id)


@router.get("/market/trending")
async def market_trending(
    chain_id: int = Query(default=1, alias="chainId"),
    limit: int = Query(default=10, ge=1, le=100),
    ctx: AppContext = Depends(get_context),
) -> TrendingResponse:
    return await ctx.market.trending(chain_id, limit)


@router.get("/portfolio/{address}")
async def portfolio(
    address: str,
    chains: Optional[str] = None,
    refresh: bool = False,
    ctx: AppContext = Depends(get_context),
) -> PortfolioResponse:
    return await ctx.gateway.get_portfolio(address, chains=chains, refresh=refresh)
