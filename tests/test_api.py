import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import WALLET, FakeBackend
from wac.config import Settings
from wac.core.chat import CONNECT_WALLET_REPLY, GENERAL_FALLBACK_REPLY
from wac.main import create_app
from wac.middleware import DEMO_MODE_HEADER


@pytest.fixture
def backend():
    return FakeBackend({
        "/bots": {"success": True, "bots": [], "count": 0},
        "/leaderboard": {"success": True, "leaderboard": []},
        "/challenges/c1/complete": (400, {"error": "Challenge already completed"}),
    })


@pytest.fixture
def client(make_context, backend):
    app = create_app(make_context(backend))
    with TestClient(app) as test_client:
        yield test_client


class TestWacAPI:
    """Served HTTP API."""

    def test_root(self, client):
        data = client.get("/").json()
        assert data["health"] == "/healthz"

    def test_health_endpoint(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["demoMode"] is False
        assert data["chatApi"]["configured"] is False
        assert response.headers["x-request-id"]

    def test_chat_creates_thread(self, client):
        response = client.post("/chat", json={"userPrompt": "What is DeFi?"})
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "local"
        assert data["message"]["content"] == GENERAL_FALLBACK_REPLY
        assert data["threadTitle"] == "What is DeFi?"

        threads = client.get("/threads").json()
        assert [t["id"] for t in threads] == [data["threadId"]]
        assert client.get("/threads/current").json()["id"] == data["threadId"]
        assert len(client.get(f"/threads/{data['threadId']}").json()["messages"]) == 2

    def test_chat_rejects_empty_prompt(self, client):
        assert client.post("/chat", json={"userPrompt": ""}).status_code == 422

    def test_analyze_uses_camel_case(self, client):
        data = client.post("/chat/analyze", json={"userPrompt": "Swap 100 USDC to ETH"}).json()
        assert data["reply"] == CONNECT_WALLET_REPLY
        assert data["requiresAction"] is False
        assert client.get("/threads").json() == []

    def test_unknown_thread_is_404(self, client):
        assert client.get("/threads/nope").status_code == 404
        assert client.delete("/threads/nope").status_code == 404

    def test_new_chat_then_delete(self, client):
        first = client.post("/chat", json={"userPrompt": "first"}).json()["threadId"]
        assert client.post("/threads/new").json() == {"success": True}
        assert client.get("/threads/current").json() is None
        second = client.post("/chat", json={"userPrompt": "second"}).json()["threadId"]

        deleted = client.delete(f"/threads/{first}").json()
        assert deleted["deleted"] == [first]
        assert deleted["localOnly"] is True

        bulk = client.post("/threads/delete", json={"threadIds": [second]}).json()
        assert bulk["success"] is True
        assert client.get("/threads").json() == []

    def test_delete_all(self, client):
        client.post("/chat", json={"userPrompt": "one"})
        client.post("/threads/new")
        client.post("/chat", json={"userPrompt": "two"})

        result = client.delete("/threads").json()

        assert len(result["deleted"]) == 2
        assert client.get("/threads").json() == []

    def test_news(self, client):
        data = client.get("/news", params={"limit": 5}).json()
        assert data["count"] == 5
        assert len(data["news"]) == 5
        assert {"id", "title", "timestamp", "trend"} <= set(data["news"][0])

        refreshed = client.post("/news/refresh").json()
        assert refreshed["count"] == 10

    def test_live_bots(self, client):
        response = client.get("/bots")
        assert response.json()["demo"] is False
        assert response.headers[DEMO_MODE_HEADER] == "false"

    def test_backend_client_error_keeps_status(self, client):
        response = client.post("/challenges/c1/complete", json={"walletAddress": WALLET})
        assert response.status_code == 400
        assert response.json()["error"] == "Challenge already completed"

    def test_leaderboard_query(self, client, backend):
        client.get("/leaderboard", params={"type": "level", "limit": 3})
        request = backend.requests[-1]
        assert request.url.params["type"] == "level"
        assert request.url.params["limit"] == "3"


class TestDemoMode:

    def test_outage_switches_to_demo_data(self, make_context):
        backend = FakeBackend({"/bots": httpx.ConnectError("refused")})
        with TestClient(create_app(make_context(backend))) as client:
            response = client.get("/bots")
            assert response.status_code == 200
            assert response.json()["demo"] is True
            assert response.headers[DEMO_MODE_HEADER] == "true"

            health = client.get("/healthz").json()
            assert health["status"] == "degraded"
            assert health["demoMode"] is True

    def test_outage_without_fallback_is_503(self, make_context, tmp_path):
        settings = Settings(api_base_url="http://backend.test", storage_path=tmp_path / "s.json", enable_demo_fallback=False)
        backend = FakeBackend({"/market/prices": httpx.ConnectError("refused")})
        with TestClient(create_app(make_context(backend, settings=settings))) as client:
            response = client.get("/market/prices", params={"symbols": "eth,btc"})
            assert response.status_code == 503
            assert response.json()["success"] is False

    def test_prices_demo_data(self, make_context):
        backend = FakeBackend({"/market/prices": (500, {})})
        with TestClient(create_app(make_context(backend))) as client:
            data = client.get("/market/prices", params={"symbols": "eth,btc"}).json()
            assert data["demo"] is True
            assert set(data["prices"]) == {"ETH", "BTC"}
            assert data["chainId"] == 1


class TestRemoteChat:

    def test_remote_reply_and_thread_id(self, make_context):
        chat = FakeBackend({"/chat": {"reply": "from the server", "thread_id": "srv-1"}})
        with TestClient(create_app(make_context(chat_handler=chat))) as client:
            data = client.post("/chat", json={"userPrompt": "hello"}).json()

            assert data["source"] == "remote"
            assert data["threadId"] == "srv-1"
            assert client.get("/threads/srv-1").status_code == 200
            assert client.get("/healthz").json()["chatApi"]["configured"] is True
