from typing import Literal, Optional

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..types.backend import BotPerformanceResponse, BotsResponse, BotToggleResponse, WalletRequest
from .deps import get_context

router = APIRouter()

BotCategory = Literal["arbitrage", "price-impact", "twap", "mev-protection"]


@router.get("/bots")
async def list_bots(
    wallet_address: Optional[str] = None,
    category: Optional[BotCategory] = None,
    ctx: AppContext = Depends(get_context),
) -> BotsResponse:
    return await ctx.gateway.list_bots(wallet_address=wallet_address, category=category)


@router.post("/bots/{bot_id}/toggle")
async def toggle_bot(
    bot_id: str,
    request: Optional[WalletRequest] = None,
    ctx: AppContext = Depends(get_context),
) -> BotToggleResponse:
    wallet = request.wallet_address if request else None
    return await ctx.gateway.toggle_bot(bot_id, wallet)


@router.get("/bots/{bot_id}/performance")
async def bot_performance(
    bot_id: str,
    wallet_address: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
) -> BotPerformanceResponse:
    return await ctx.gateway.get_bot_performance(bot_id, wallet_address)
