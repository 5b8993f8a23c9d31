import httpx
import pytest

from conftest import FakeBackend
from wac.core.chat import GENERAL_FALLBACK_REPLY
from wac.services.chat_transport import ChatTransport
from wac.services.session import ChatSession
from wac.services.storage import LocalStorage
from wac.services.threads import ThreadStore
from wac.types.chat import IntelligentChatResponse


class _LocalService:
    """Stands in for the local pipeline."""

    def __init__(self, reply="local answer", error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    async def process_request(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return IntelligentChatResponse(reply=self.reply)


def _session(make_client, chat_routes=None, local=None):
    client = make_client(FakeBackend(chat_routes), base_url="http://chat.test") if chat_routes is not None else None
    transport = ChatTransport(client, system_prompt="be helpful")
    store = ThreadStore(LocalStorage())
    return ChatSession(store, transport, local or _LocalService()), store


class TestChatTransport:

    @pytest.mark.asyncio
    async def test_sends_prompt_and_context(self, make_client):
        backend = FakeBackend({"/chat": {"reply": "  hello  ", "thread_id": "srv-1", "parsed_intent": {"type": "swap"}}})
        transport = ChatTransport(make_client(backend, base_url="http://chat.test"), system_prompt="be helpful")

        reply = await transport.send_chat_message("hi", "local-1", "0xabc")

        assert reply.reply == "hello"
        assert reply.thread_id == "srv-1"
        assert reply.action_data == {"type": "swap"}
        assert backend.bodies("/chat") == [{
            "user_prompt": "hi",
            "system_prompt": "be helpful",
            "thread_id": "local-1",
            "wallet_address": "0xabc",
        }]

    @pytest.mark.asyncio
    async def test_not_configured_returns_none(self):
        assert await ChatTransport(None, system_prompt="x").send_chat_message("hi") is None

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self, make_client):
        backend = FakeBackend({"/chat": (502, {"error": "upstream"})})
        transport = ChatTransport(make_client(backend), system_prompt="x")
        assert await transport.send_chat_message("hi") is None

    @pytest.mark.asyncio
    async def test_invalid_payload_returns_none(self, make_client):
        backend = FakeBackend({"/chat": {"unexpected": True}})
        transport = ChatTransport(make_client(backend), system_prompt="x")
        assert await transport.send_chat_message("hi") is None

    @pytest.mark.asyncio
    async def test_action_response_requires_flag(self, make_client):
        action = {
            "type": "swap",
            "summary": {"emoji": "💎", "action": "Swap", "primaryDetails": ""},
            "primaryAction": {
                "text": "Swap",
                "emoji": "🚀",
                "actionType": "swap",
                "executionData": {"fromToken": "ETH"},
            },
        }
        backend = FakeBackend({"/chat": {"reply": "ok", "actionResponse": action, "requiresAction": False}})
        transport = ChatTransport(make_client(backend), system_prompt="x")

        reply = await transport.send_chat_message("hi")

        assert reply.action_response.primary_action.disabled is True
        assert reply.action_response.primary_action.execution_data is None


class TestChatSession:
    """Remote first, then local pipeline, then static reply."""

    @pytest.mark.asyncio
    async def test_remote_reply_rekeys_thread(self, make_client):
        session, store = _session(make_client, {"/chat": {"reply": "remote answer", "thread_id": "srv-9"}})

        turn = await session.send_message("Swap 100 USDC to ETH")

        assert turn.source == "remote"
        assert turn.thread_id == "srv-9"
        assert turn.thread_title == "Swap 100 USDC to ETH"
        assert turn.message.content == "remote answer"
        assert [t.id for t in store.history()] == ["srv-9"]
        assert [m.role for m in store.current().messages] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_local_fallback_when_remote_fails(self, make_client):
        local = _LocalService()
        session, store = _session(make_client, {"/chat": httpx.ConnectError("refused")}, local)

        turn = await session.send_message("Swap 100 USDC to ETH", wallet_address="0xabc")

        assert turn.source == "local"
        assert turn.message.content == "local answer"
        assert local.requests[0].wallet_address == "0xabc"
        assert store.get(turn.thread_id) is not None

    @pytest.mark.asyncio
    async def test_static_reply_when_everything_fails(self, make_client):
        session, _ = _session(make_client, None, _LocalService(error=ValueError("broken")))

        turn = await session.send_message("hello")

        assert turn.source == "static"
        assert turn.message.content == GENERAL_FALLBACK_REPLY

    @pytest.mark.asyncio
    async def test_follow_up_appends_to_current_thread(self, make_client):
        session, store = _session(make_client, None)

        first = await session.send_message("first question")
        second = await session.send_message("second question")

        assert first.thread_id == second.thread_id
        thread = store.get(first.thread_id)
        assert [m.content for m in thread.messages if m.role == "user"] == ["first question", "second question"]
        assert thread.title == "first question"

    @pytest.mark.asyncio
    async def test_new_chat_starts_fresh_thread(self, make_client):
        session, store = _session(make_client, None)

        first = await session.send_message("first")
        session.new_chat()
        second = await session.send_message("second")

        assert first.thread_id != second.thread_id
        assert [t.id for t in store.history()] == [second.thread_id, first.thread_id]

    @pytest.mark.asyncio
    async def test_explicit_thread_id_continues_that_thread(self, make_client):
        session, store = _session(make_client, None)

        first = await session.send_message("first")
        session.new_chat()
        await session.send_message("other")
        again = await session.send_message("back to first", thread_id=first.thread_id)

        assert again.thread_id == first.thread_id
        assert len(store.get(first.thread_id).messages) == 4
