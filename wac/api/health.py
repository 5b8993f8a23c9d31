from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..context import AppContext
from .deps import get_context

router = APIRouter()


@router.get("/healthz")
async def health_check(ctx: AppContext = Depends(get_context)) -> Dict[str, Any]:
    """Health check reporting backend availability and demo mode"""
    status = ctx.api_status
    chat_status = ctx.chat_client.status if ctx.chat_client is not None else None

    return {
        "status": "degraded" if status.demo_mode else "healthy",
        "demoMode": status.demo_mode,
        "backend": {
            "configured": ctx.backend.configured,
            "available": status.available,
            "lastError": status.last_error,
            "checkedAt": status.checked_at,
        },
        "chatApi": {
            "configured": ctx.transport.enabled,
            "available": chat_status.available if chat_status else False,
            "lastError": chat_status.last_error if chat_status else None,
        },
    }
