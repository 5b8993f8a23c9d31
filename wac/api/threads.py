from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..context import AppContext
from ..services.threads import BulkDeleteResult
from ..types.backend import ThreadListResponse
from ..types.chat import ChatThread, DeleteThreadsRequest, DeleteThreadsResponse
from .deps import get_context

router = APIRouter()


def _bulk_response(result: BulkDeleteResult) -> DeleteThreadsResponse:
    return DeleteThreadsResponse(
        success=result.ok,
        deleted=result.deleted,
        failed=result.failed,
        local_only=result.local_only,
    )


@router.get("/threads")
async def list_threads(ctx: AppContext = Depends(get_context)) -> List[ChatThread]:
    """Local thread history, newest first"""
    return ctx.thread_store.history()


@router.get("/threads/current")
async def current_thread(ctx: AppContext = Depends(get_context)) -> Optional[ChatThread]:
    return ctx.thread_store.current()


@router.get("/threads/remote")
async def remote_threads(
    wallet_address: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
) -> ThreadListResponse:
    """Threads stored by the chat backend"""
    return await ctx.threads.remote_threads(wallet_address)


@router.get("/threads/{thread_id}")
async def get_thread(thread_id: str, ctx: AppContext = Depends(get_context)) -> ChatThread:
    thread = ctx.thread_store.get(thread_id)
    if thread is None:
        current = ctx.thread_store.current()
        if current is None or current.id != thread_id:
            thread = await ctx.threads.fetch_remote_thread(thread_id)
        else:
            thread = current
    if thread is None:
        raise HTTPException(status_code=404, detail=f"Thread {thread_id} not found")
    return thread


@router.post("/threads/new")
async def new_thread(ctx: AppContext = Depends(get_context)) -> Dict[str, bool]:
    ctx.session.new_chat()
    return {"success": True}


@router.delete("/threads/{thread_id}")
async def delete_thread(thread_id: str, ctx: AppContext = Depends(get_context)) -> DeleteThreadsResponse:
    current = ctx.thread_store.current()
    known = ctx.thread_store.get(thread_id) is not None or (current is not None and current.id == thread_id)
    if not known:
        raise HTTPException(status_code=404, detail=f"Thread {thread_id} not found")

    result = await ctx.threads.delete_thread(thread_id)
    if result.failed:
        raise HTTPException(status_code=502, detail=f"Failed to delete thread {thread_id}")
    return _bulk_response(result)


@router.post("/threads/delete")
async def delete_threads(
    request: DeleteThreadsRequest,
    ctx: AppContext = Depends(get_context),
) -> DeleteThreadsResponse:
    """Bulk delete; threads the backend refused to delete stay in history"""
    return _bulk_response(await ctx.threads.delete_threads(request.thread_ids))


@router.delete("/threads")
async def delete_all_threads(ctx: AppContext = Depends(get_context)) -> DeleteThreadsResponse:
    return _bulk_response(await ctx.threads.delete_all())
