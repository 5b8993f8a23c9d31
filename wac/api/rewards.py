"""Play-to-earn endpoints: progress, challenges, daily reward, leaderboard."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..types.backend import (
    ChallengeCompleteRequest,
    ChallengeCompleteResponse,
    ChallengesResponse,
    DailyRewardResponse,
    LeaderboardResponse,
    UserProgressResponse,
    WalletRequest,
)
from .deps import get_context

router = APIRouter()


@router.get("/user/progress/{address}")
async def user_progress(address: str, ctx: AppContext = Depends(get_context)) -> UserProgressResponse:
    return await ctx.gateway.get_user_progress(address)


@router.get("/challenges")
async def list_challenges(
    difficulty: Optional[Literal["beginner", "intermediate", "advanced"]] = None,
    category: Optional[str] = None,
    completed: Optional[bool] = None,
    ctx: AppContext = Depends(get_context),
) -> ChallengesResponse:
    return await ctx.gateway.list_challenges(difficulty=difficulty, category=category, completed=completed)


@router.post("/challenges/{challenge_id}/complete")
async def complete_challenge(
    challenge_id: str,
    request: Optional[ChallengeCompleteRequest] = None,
    ctx: AppContext = Depends(get_context),
) -> ChallengeCompleteResponse:
    request = request or ChallengeCompleteRequest()
    return await ctx.gateway.complete_challenge(challenge_id, request.wallet_address, request.proof)


@router.post("/daily-reward")
async def daily_reward(
    request: Optional[WalletRequest] = None,
    ctx: AppContext = Depends(get_context),
) -> DailyRewardResponse:
    wallet = request.wallet_address if request else None
    return await ctx.gateway.claim_daily_reward(wallet)


@router.get("/leaderboard")
async def leaderboard(
    board_type: Literal["xp", "level"] = Query(default="xp", alias="type"),
    limit: int = Query(default=10, ge=1, le=100),
    ctx: AppContext = Depends(get_context),
) -> LeaderboardResponse:
    return await ctx.gateway.get_leaderboard(board_type, limit)
