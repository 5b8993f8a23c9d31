import httpx
import pytest

from conftest import FakeBackend
from wac.providers.errors import BackendResponseError, BackendUnavailableError
from wac.services.gateway import BackendGateway


class TestDemoFallback:
    """Backend outages degrade to demo data and flip the demo flag."""

    @pytest.mark.asyncio
    async def test_live_data_passes_through(self, make_client):
        backend = FakeBackend({"/bots": {"success": True, "bots": [], "count": 0}})
        gateway = BackendGateway(make_client(backend))

        response = await gateway.list_bots()

        assert response.demo is False
        assert gateway.demo_mode is False

    @pytest.mark.asyncio
    async def test_unreachable_backend_serves_demo_data(self, make_client):
        backend = FakeBackend({"/bots": httpx.ConnectError("refused")})
        gateway = BackendGateway(make_client(backend))

        response = await gateway.list_bots(category="arbitrage")

        assert response.demo is True
        assert response.bots
        assert all(bot.category == "arbitrage" for bot in response.bots)
        assert gateway.demo_mode is True
        assert "ConnectError" in gateway.status.last_error

    @pytest.mark.asyncio
    async def test_demo_mode_recovers(self, make_client):
        backend = FakeBackend({"/leaderboard": (503, {"error": "maintenance"})})
        gateway = BackendGateway(make_client(backend))

        await gateway.get_leaderboard()
        assert gateway.demo_mode is True

        backend.routes["/leaderboard"] = {"success": True, "leaderboard": []}
        response = await gateway.get_leaderboard()

        assert response.demo is False
        assert gateway.demo_mode is False

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self, make_client):
        backend = FakeBackend({"/challenges/c1/complete": (400, {"error": "Challenge already completed"})})
        gateway = BackendGateway(make_client(backend))

        with pytest.raises(BackendResponseError) as exc_info:
            await gateway.complete_challenge("c1", "0xabc")

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "Challenge already completed"
        assert gateway.demo_mode is False

    @pytest.mark.asyncio
    async def test_fallback_disabled_raises(self, make_client):
        backend = FakeBackend({"/bots": httpx.ConnectError("refused")})
        gateway = BackendGateway(make_client(backend), enable_demo_fallback=False)

        with pytest.raises(BackendUnavailableError):
            await gateway.list_bots()

    @pytest.mark.asyncio
    async def test_news_fallback_is_filtered(self, make_client):
        backend = FakeBackend({"/market/news": (500, {})})
        gateway = BackendGateway(make_client(backend))

        response = await gateway.get_news(category="DeFi")

        assert response.demo is True
        assert [item.category for item in response.news] == ["DeFi"]
        assert response.count == 1

    @pytest.mark.asyncio
    async def test_prices_demo_covers_requested_symbols(self, make_client):
        gateway = BackendGateway(make_client(FakeBackend({"/market/prices": httpx.ReadTimeout("slow")})))

        response = await gateway.get_prices(["ETH", "BTC"], chain_id=137)

        assert response.demo is True
        assert set(response.prices) >= {"ETH", "BTC"}
