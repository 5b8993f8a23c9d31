"""Remote chat endpoint access. Failures return None so callers can fall back locally."""

from __future__ import annotations

import logging
from typing import Optional

from ..providers.backend import BackendClient
from ..providers.errors import BackendError
from ..types.chat import ChatReply

logger = logging.getLogger(__name__)


class ChatTransport:
    def __init__(self, client: Optional[BackendClient], *, system_prompt: str) -> None:
        self.client = client
        self.system_prompt = system_prompt

    @property
    def enabled(self) -> bool:
        return self.client is not None and self.client.configured

    async def send_chat_message(
        self,
        prompt: str,
        thread_id: Optional[str] = None,
        wallet_address: Optional[str] = None,
    ) -> Optional[ChatReply]:
        """
        Send one user prompt to the remote chat API.

        Returns None when the endpoint is not configured, unreachable, answers
        with an error status, or returns a payload we cannot read.
        """
        if not self.enabled:
            return None

        try:
            response = await self.client.chat(
                prompt,
                system_prompt=self.system_prompt,
                thread_id=thread_id,
                wallet_address=wallet_address,
            )
        except BackendError as e:
            logger.warning(f"Chat API request failed, falling back to local pipeline: {e}")
            return None

        action_data = response.parsed_intent if isinstance(response.parsed_intent, dict) else None
        return ChatReply(
            reply=response.reply.strip(),
            action_data=action_data,
            thread_id=response.thread_id,
            thread_title=response.thread_title,
            action_response=response.action_response,
            requires_action=response.requires_action,
            action_type=response.action_type,
        )
