"""
Chat session: one user turn from prompt to persisted thread.

The remote chat endpoint is tried first. When it gives nothing back the local
pipeline answers, and if that fails too a static reply keeps the conversation
going.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..core.chat import GENERAL_FALLBACK_REPLY, IntelligentChatService
from ..types.chat import ChatMessage, ChatThread, ChatTurn, IntelligentChatRequest
from .chat_transport import ChatTransport
from .threads import ThreadStore, new_thread_id

logger = logging.getLogger(__name__)


class ChatSession:
    def __init__(
        self,
        store: ThreadStore,
        transport: ChatTransport,
        local_service: IntelligentChatService,
    ) -> None:
        self.store = store
        self.transport = transport
        self.local_service = local_service

    def _messages_for(self, thread_id: Optional[str]) -> Tuple[str, List[ChatMessage]]:
        thread = self.store.load_thread(thread_id) if thread_id else self.store.current()
        if thread is None:
            return thread_id or new_thread_id(), []
        if thread_id and thread.id != thread_id:
            # unknown id: start that thread fresh instead of appending to the current one
            return thread_id, []
        return thread.id, list(thread.messages)

    async def send_message(
        self,
        prompt: str,
        wallet_address: Optional[str] = None,
        thread_id: Optional[str] = None,
    ) -> ChatTurn:
        thread_id, messages = self._messages_for(thread_id)
        messages.append(ChatMessage(content=prompt.strip(), role="user"))
        self.store.save_thread(messages, thread_id)

        assistant, source, server_thread_id = await self._answer(prompt, thread_id, wallet_address)
        messages.append(assistant)

        previous_id = None
        if server_thread_id and server_thread_id != thread_id:
            logger.debug(f"Server assigned thread id {server_thread_id} (was {thread_id})")
            previous_id, thread_id = thread_id, server_thread_id

        thread = self.store.save_thread(messages, thread_id, previous_id=previous_id)
        return ChatTurn(
            thread_id=thread.id,
            thread_title=thread.title,
            message=assistant,
            source=source,
        )

    async def _answer(
        self,
        prompt: str,
        thread_id: str,
        wallet_address: Optional[str],
    ) -> Tuple[ChatMessage, str, Optional[str]]:
        remote = await self.transport.send_chat_message(prompt, thread_id, wallet_address)
        if remote is not None:
            message = ChatMessage(
                content=remote.reply,
                role="assistant",
                action_data=remote.action_data,
                action_response=remote.action_response,
            )
            return message, "remote", remote.thread_id

        try:
            local = await self.local_service.process_request(
                IntelligentChatRequest(user_prompt=prompt, wallet_address=wallet_address, thread_id=thread_id)
            )
        except Exception as e:
            logger.error(f"Local chat pipeline failed: {e}", exc_info=True)
            return ChatMessage(content=GENERAL_FALLBACK_REPLY, role="assistant"), "static", None

        message = ChatMessage(
            content=local.reply,
            role="assistant",
            action_response=local.action_response,
        )
        return message, "local", None

    def current_thread(self) -> Optional[ChatThread]:
        return self.store.current()

    def load_thread(self, thread_id: Optional[str] = None) -> Optional[ChatThread]:
        return self.store.load_thread(thread_id)

    def new_chat(self) -> None:
        """Start over; the next message opens a fresh thread."""
        self.store.clear_current()
