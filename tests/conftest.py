import json
import random
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from wac.config import Settings
from wac.context import AppContext
from wac.providers.backend import ApiStatus, BackendClient
from wac.providers.quotes import StaticQuoteSource
from wac.services.storage import LocalStorage

WALLET = "0x1234567890abcdef1234567890abcdef12345678"


def portfolio_payload(assets: List[Dict], total_value: float = 10_000.0) -> Dict:
    return {
        "success": True,
        "summary": {"totalValue": total_value, "activeAssets": len(assets)},
        "assets": assets,
    }


def prices_payload(prices: Dict[str, Dict]) -> Dict:
    return {"success": True, "prices": prices, "chainId": 1}


class FakeBackend:
    """Routes httpx requests to canned JSON responses keyed by path."""

    def __init__(self, routes: Optional[Dict[str, object]] = None):
        self.routes: Dict[str, object] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, body = route if isinstance(route, tuple) else (200, route)
        return httpx.Response(status, json=body)

    def bodies(self, path: str) -> List[Dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path and r.content]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_client() -> Callable[..., BackendClient]:
    def _make(handler, base_url: str = "http://backend.test", status: Optional[ApiStatus] = None) -> BackendClient:
        return BackendClient(base_url, status=status, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        api_base_url="http://backend.test",
        chat_api_url="",
        storage_path=tmp_path / "storage.json",
        quote_seed=7,
    )


@pytest.fixture
def make_context(test_settings, make_client):
    def _make(backend_handler=None, chat_handler=None, settings: Optional[Settings] = None) -> AppContext:
        settings = settings or test_settings
        status = ApiStatus()
        backend = make_client(backend_handler or FakeBackend(), status=status)
        chat_client = make_client(chat_handler, base_url="http://chat.test") if chat_handler else None
        context = AppContext(
            settings,
            storage=LocalStorage(),
            quotes=StaticQuoteSource(),
            rng=random.Random(7),
            backend=backend,
            chat_client=chat_client,
        )
        return context

    return _make
