from fastapi import APIRouter, Depends

from ..context import AppContext
from ..types.chat import ChatTurn, IntelligentChatRequest, IntelligentChatResponse
from .deps import get_context

router = APIRouter()


@router.post("/chat")
async def chat_endpoint(
    request: IntelligentChatRequest,
    ctx: AppContext = Depends(get_context),
) -> ChatTurn:
    """Answer one prompt and persist it in the thread history"""
    return await ctx.session.send_message(
        request.user_prompt,
        wallet_address=request.wallet_address,
        thread_id=request.thread_id,
    )


@router.post("/chat/analyze")
async def analyze_endpoint(
    request: IntelligentChatRequest,
    ctx: AppContext = Depends(get_context),
) -> IntelligentChatResponse:
    """Run the local pipeline only, without touching thread history"""
    return await ctx.chat_service.process_request(request)
