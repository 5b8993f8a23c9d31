"""
Chat thread persistence and deletion.

Threads live in local storage under two keys: ``chatHistory`` (newest first,
capped) and ``currentChatThread``. Deletion also reaches out to the backend
when one is configured.
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..providers.backend import BackendClient
from ..providers.errors import (
    BackendError,
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
)
from ..types.backend import ThreadDetailResponse, ThreadListResponse
from ..types.chat import ChatMessage, ChatThread
from . import demo_data
from .storage import LocalStorage

logger = logging.getLogger(__name__)

HISTORY_KEY = "chatHistory"
CURRENT_THREAD_KEY = "currentChatThread"
MAX_TITLE_LENGTH = 50

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def generate_thread_title(first_message: str) -> str:
    """Short title from the first user message of a thread."""
    message = first_message.strip()
    if len(message) <= MAX_TITLE_LENGTH:
        return message

    first_sentence = _SENTENCE_SPLIT_RE.split(message)[0].strip()
    if len(first_sentence) <= MAX_TITLE_LENGTH:
        return first_sentence

    return message[: MAX_TITLE_LENGTH - 3] + "..."


def new_thread_id() -> str:
    return uuid.uuid4().hex


def _from_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def thread_from_remote(detail: ThreadDetailResponse) -> ChatThread:
    """Convert a backend thread (epoch-ms timestamps) into the local thread shape."""
    remote = detail.thread
    messages = [
        ChatMessage(id=m.id, content=m.content, role=m.role, timestamp=_from_ms(m.timestamp))
        for m in detail.messages
    ]
    title = remote.title or (generate_thread_title(messages[0].content) if messages else "New chat")
    return ChatThread(
        id=remote.id,
        title=title,
        messages=messages,
        created_at=_from_ms(remote.created_at),
        updated_at=_from_ms(remote.updated_at or remote.created_at),
    )


def _dump(thread: ChatThread) -> Dict[str, Any]:
    return thread.model_dump(mode="json", by_alias=True, exclude_none=True)


class ThreadStore:
    """Local thread history backed by `LocalStorage`."""

    def __init__(self, storage: LocalStorage, *, max_threads: int = 50) -> None:
        self.storage = storage
        self.max_threads = max_threads

    def _parse(self, raw: Any) -> Optional[ChatThread]:
        try:
            return ChatThread.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable stored thread: {e.error_count()} validation errors")
            return None

    def history(self) -> List[ChatThread]:
        raw_threads = self.storage.get_item(HISTORY_KEY) or []
        threads = []
        for raw in raw_threads:
            thread = self._parse(raw)
            if thread is not None:
                threads.append(thread)
        return threads

    def _write_history(self, threads: List[ChatThread]) -> None:
        self.storage.set_item(HISTORY_KEY, [_dump(t) for t in threads[: self.max_threads]])

    def current(self) -> Optional[ChatThread]:
        raw = self.storage.get_item(CURRENT_THREAD_KEY)
        if raw is None:
            return None
        return self._parse(raw)

    def get(self, thread_id: str) -> Optional[ChatThread]:
        for thread in self.history():
            if thread.id == thread_id:
                return thread
        return None

    def load_thread(self, thread_id: Optional[str] = None) -> Optional[ChatThread]:
        """Thread by id, falling back to the current thread."""
        if thread_id:
            thread = self.get(thread_id)
            if thread is not None:
                return thread
        return self.current()

    def save_thread(
        self,
        messages: List[ChatMessage],
        thread_id: Optional[str] = None,
        *,
        previous_id: Optional[str] = None,
    ) -> Optional[ChatThread]:
        """
        Persist `messages` as the current thread and upsert it into history.

        `previous_id` re-keys an existing entry, e.g. when the server assigns
        its own id to a thread we created locally. Returns None for an empty
        message list, which is never stored.
        """
        if not messages:
            return None

        history = self.history()
        current = self.current()
        thread_id = thread_id or (current.id if current else None) or new_thread_id()
        match_ids = {thread_id}
        if previous_id:
            match_ids.add(previous_id)

        existing_index = next((i for i, t in enumerate(history) if t.id in match_ids), None)
        now = datetime.now(timezone.utc)
        created_at = now
        if existing_index is not None:
            created_at = history[existing_index].created_at
        elif current is not None and current.id in match_ids:
            created_at = current.created_at

        thread = ChatThread(
            id=thread_id,
            title=generate_thread_title(messages[0].content),
            messages=list(messages),
            created_at=created_at,
            updated_at=now,
        )

        self.storage.set_item(CURRENT_THREAD_KEY, _dump(thread))

        if existing_index is not None:
            # keep the position of the first match, drop any other entry under either id
            history[existing_index] = thread
            history = [t for i, t in enumerate(history) if i == existing_index or t.id not in match_ids]
        else:
            history.insert(0, thread)
        self._write_history(history)
        return thread

    def clear_current(self) -> None:
        self.storage.remove_item(CURRENT_THREAD_KEY)

    def remove(self, thread_ids: Iterable[str]) -> List[str]:
        """Drop threads from history; clears the current thread if it was removed."""
        ids = set(thread_ids)
        history = self.history()
        removed = [t.id for t in history if t.id in ids]
        if removed:
            self._write_history([t for t in history if t.id not in ids])

        current = self.current()
        if current is not None and current.id in ids:
            self.clear_current()
            if current.id not in removed:
                removed.append(current.id)
        return removed

    def thread_ids(self) -> List[str]:
        """Ids in history plus the active thread if it was never saved to history."""
        ids = [t.id for t in self.history()]
        current = self.current()
        if current is not None and current.id not in ids:
            ids.append(current.id)
        return ids


@dataclass
class BulkDeleteResult:
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    local_only: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed


class ThreadService:
    """Deletes threads locally and on the backend."""

    DELETED = "deleted"
    FAILED = "failed"
    LOCAL = "local"

    def __init__(self, store: ThreadStore, backend: Optional[BackendClient] = None) -> None:
        self.store = store
        self.backend = backend

    async def _delete_remote(self, thread_id: str) -> str:
        if self.backend is None or not self.backend.configured:
            return self.LOCAL
        try:
            await self.backend.delete_thread(thread_id)
        except BackendUnavailableError as e:
            logger.warning(f"Backend unreachable, deleting thread {thread_id} locally only: {e}")
            return self.LOCAL
        except BackendResponseError as e:
            if e.is_not_found:
                return self.DELETED
            logger.error(f"Failed to delete thread {thread_id} on backend: {e}")
            return self.FAILED
        except BackendPayloadError:
            # the backend accepted the delete but sent an odd acknowledgement
            return self.DELETED
        return self.DELETED

    async def delete_thread(self, thread_id: str) -> BulkDeleteResult:
        return await self.delete_threads([thread_id])

    async def delete_threads(self, thread_ids: List[str]) -> BulkDeleteResult:
        """Delete many threads concurrently; remote rejections stay in local history."""
        unique_ids = list(dict.fromkeys(thread_ids))
        outcomes = await asyncio.gather(*(self._delete_remote(tid) for tid in unique_ids))

        result = BulkDeleteResult()
        to_remove = []
        for thread_id, outcome in zip(unique_ids, outcomes):
            if outcome == self.FAILED:
                result.failed.append(thread_id)
                continue
            if outcome == self.LOCAL:
                result.local_only = True
            to_remove.append(thread_id)

        self.store.remove(to_remove)
        result.deleted = to_remove
        if result.failed:
            logger.warning(f"Deleted {len(result.deleted)} threads, {len(result.failed)} failed")
        return result

    async def delete_all(self) -> BulkDeleteResult:
        return await self.delete_threads(self.store.thread_ids())

    async def remote_threads(self, wallet_address: Optional[str] = None) -> ThreadListResponse:
        """Threads the chat backend knows about; demo list when it is unavailable."""
        if self.backend is None or not self.backend.configured:
            return demo_data.threads()
        try:
            return await self.backend.list_threads(wallet_address)
        except BackendError as e:
            logger.warning(f"Could not list remote threads: {e}")
            return demo_data.threads()

    async def fetch_remote_thread(self, thread_id: str) -> Optional[ChatThread]:
        if self.backend is None or not self.backend.configured:
            return None
        try:
            detail = await self.backend.get_thread(thread_id)
        except BackendResponseError as e:
            if not e.is_not_found:
                logger.warning(f"Could not load remote thread {thread_id}: {e}")
            return None
        except (BackendUnavailableError, BackendPayloadError) as e:
            logger.warning(f"Could not load remote thread {thread_id}: {e}")
            return None
        return thread_from_remote(detail)
