"""
Application context.

Everything that used to be process-wide mutable state (API status, news cache,
HTTP clients, RNG) lives on one `AppContext` built at startup and stored on
``app.state.context``.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from .cache import TTLCache
from .config import Settings, settings as default_settings
from .core.chat import IntelligentChatService
from .core.portfolio import PortfolioAnalyzer
from .core.routes import RouteAnalyzer
from .providers.backend import ApiStatus, BackendClient
from .providers.base import QuoteSource
from .providers.quotes import RandomQuoteSource
from .services.chat_transport import ChatTransport
from .services.gateway import BackendGateway
from .services.market import MarketService
from .services.news import NewsService
from .services.session import ChatSession
from .services.storage import LocalStorage
from .services.threads import ThreadService, ThreadStore

logger = logging.getLogger(__name__)


class AppContext:
    """Wires settings into clients and services."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        storage: Optional[LocalStorage] = None,
        quotes: Optional[QuoteSource] = None,
        rng: Optional[random.Random] = None,
        backend: Optional[BackendClient] = None,
        chat_client: Optional[BackendClient] = None,
    ) -> None:
        self.settings = settings or default_settings
        self._storage_override = storage
        self._quotes_override = quotes
        self._rng_override = rng
        self._backend_override = backend
        self._chat_override = chat_client
        self._build()

    def _build(self) -> None:
        s = self.settings
        self.rng = self._rng_override or random.Random(s.quote_seed)

        self.backend = self._backend_override or BackendClient(
            s.api_base_url,
            timeout=s.request_timeout_seconds,
            status=ApiStatus(),
        )
        self.api_status = self.backend.status
        # The remote chat has its own status so a dead chat API does not put the
        # whole UI into demo mode.
        self.chat_client = self._chat_override
        if self.chat_client is None and s.has_chat_api:
            self.chat_client = BackendClient(s.chat_api_url, timeout=s.request_timeout_seconds)

        self.gateway = BackendGateway(self.backend, enable_demo_fallback=s.enable_demo_fallback)

        self.news_cache = TTLCache(default_ttl=s.news_cache_ttl_seconds, max_size=s.max_cache_size)
        self.news = NewsService(cache=self.news_cache, rng=self.rng, ttl_seconds=s.news_cache_ttl_seconds)
        self.market = MarketService(self.gateway, rng=self.rng)

        self.quotes = self._quotes_override or RandomQuoteSource(self.rng)
        self.portfolio_analyzer = PortfolioAnalyzer(self.backend, chains=s.supported_chain_ids)
        self.route_analyzer = RouteAnalyzer(self.quotes, slippage_tolerance=s.default_slippage_tolerance)
        self.chat_service = IntelligentChatService(self.portfolio_analyzer, self.route_analyzer, self.market)

        self.storage = self._storage_override or LocalStorage(s.storage_path)
        self.thread_store = ThreadStore(self.storage, max_threads=s.max_chat_threads)
        self.threads = ThreadService(self.thread_store, self.chat_client)
        self.transport = ChatTransport(self.chat_client, system_prompt=s.chat_system_prompt)
        self.session = ChatSession(self.thread_store, self.transport, self.chat_service)

    @property
    def demo_mode(self) -> bool:
        return self.api_status.demo_mode

    async def reset(self, settings: Optional[Settings] = None) -> None:
        """Close clients and rebuild everything, optionally with new settings."""
        await self.aclose()
        if settings is not None:
            self.settings = settings
        if self._backend_override is not None:
            self._backend_override.status.reset()
        self._build()
        logger.info("Application context rebuilt")

    async def aclose(self) -> None:
        await self.backend.aclose()
        if self.chat_client is not None:
            await self.chat_client.aclose()
