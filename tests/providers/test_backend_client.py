import httpx
import pytest

from conftest import FakeBackend
from wac.providers.backend import ApiStatus, BackendClient
from wac.providers.errors import (
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
)


class TestRequest:
    """Error mapping and status tracking in the HTTP layer."""

    @pytest.mark.asyncio
    async def test_unconfigured_client(self):
        client = BackendClient("")
        assert client.configured is False
        with pytest.raises(BackendUnavailableError):
            await client.get_news()

    @pytest.mark.asyncio
    async def test_transport_error_marks_unavailable(self, make_client):
        status = ApiStatus()
        client = make_client(FakeBackend({"/market/news": httpx.ConnectError("refused")}), status=status)

        with pytest.raises(BackendUnavailableError):
            await client.get_news()

        assert status.available is False
        assert status.demo_mode is True
        assert status.last_error.startswith("GET /market/news")

    @pytest.mark.asyncio
    async def test_server_error_marks_unavailable(self, make_client):
        status = ApiStatus()
        client = make_client(FakeBackend({"/market/news": (502, {"error": "bad gateway"})}), status=status)

        with pytest.raises(BackendResponseError) as exc_info:
            await client.get_news()

        assert exc_info.value.is_server_error
        assert str(exc_info.value) == "bad gateway"
        assert status.available is False

    @pytest.mark.asyncio
    async def test_client_error_keeps_available(self, make_client):
        status = ApiStatus()
        status.mark_unavailable("earlier outage")
        client = make_client(FakeBackend({"/bots/x/toggle": (404, "missing")}), status=status)

        with pytest.raises(BackendResponseError) as exc_info:
            await client.toggle_bot("x")

        assert exc_info.value.is_not_found
        assert str(exc_info.value) == "API Error: 404"
        assert status.available is True

    @pytest.mark.asyncio
    async def test_invalid_json(self, make_client):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(BackendPayloadError):
            await client.get_news()

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, make_client):
        client = make_client(FakeBackend({"/market/news": {"news": [{"title": "no id"}]}}))
        with pytest.raises(BackendPayloadError):
            await client.get_news()


class TestEndpoints:

    @pytest.mark.asyncio
    async def test_prices_query(self, make_client):
        backend = FakeBackend({
            "/market/prices": {
                "success": True,
                "chainId": 137,
                "prices": {"MATIC": {"symbol": "MATIC", "price": 0.55, "change24h": 0.01, "volume24h": 1000}},
            },
        })
        client = make_client(backend)

        response = await client.get_prices(["MATIC", "ETH"], chain_id=137)

        assert backend.requests[0].url.params["symbols"] == "MATIC,ETH"
        assert backend.requests[0].url.params["chainId"] == "137"
        assert response.chain_id == 137
        assert response.prices["MATIC"].change_24h == 0.01
        assert response.prices["MATIC"].volume_24h == 1000

    @pytest.mark.asyncio
    async def test_none_params_are_dropped(self, make_client):
        backend = FakeBackend({"/challenges": {"success": True, "challenges": []}})
        client = make_client(backend)

        await client.list_challenges(difficulty="beginner", completed=False)

        params = dict(backend.requests[0].url.params)
        assert params == {"difficulty": "beginner", "completed": "false"}

    @pytest.mark.asyncio
    async def test_complete_challenge_body(self, make_client):
        backend = FakeBackend({
            "/challenges/c1/complete": {"success": True, "challengeId": "c1", "xpEarned": 100, "reward": "10"},
        })
        client = make_client(backend)

        response = await client.complete_challenge("c1", "0xabc", proof={"tx": "0x1"})

        assert backend.bodies("/challenges/c1/complete") == [{"walletAddress": "0xabc", "proof": {"tx": "0x1"}}]
        assert response.xp_earned == 100

    @pytest.mark.asyncio
    async def test_chat_omits_empty_fields(self, make_client):
        backend = FakeBackend({"/chat": {"reply": "hi"}})
        client = make_client(backend)

        await client.chat("hello")

        assert backend.bodies("/chat") == [{"user_prompt": "hello"}]

    @pytest.mark.asyncio
    async def test_aclose_allows_reuse(self, make_client):
        backend = FakeBackend({"/leaderboard": {"success": True, "leaderboard": []}})
        client = make_client(backend)

        await client.get_leaderboard()
        await client.aclose()
        await client.get_leaderboard("level", 5)

        assert backend.requests[-1].url.params["type"] == "level"
        assert len(backend.requests) == 2
