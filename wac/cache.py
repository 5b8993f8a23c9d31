"""In-memory TTL cache with least-recently-used eviction."""

import asyncio
import time
from collections import OrderedDict
from typing import Any, Callable, NamedTuple, Optional


class _Entry(NamedTuple):
    value: Any
    expires_at: float


class TTLCache:
    """
    Async-safe key/value cache.

    Entries expire ``ttl`` seconds after they were written; once ``max_size``
    is exceeded the least recently read or written key goes first. The clock
    is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        default_ttl: int = 300,
        max_size: int = 1000,
        clock: Callable[[], float] = time.time,
    ):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            self._entries.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        async with self._lock:
            self._entries[key] = _Entry(value, self._clock() + (self.default_ttl if ttl is None else ttl))
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    async def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        return len(self._entries)
