"""Tests for the AssistantsClient SDK against the in-process app."""

import httpx
import pytest

from conftest import make_token
from assistant_relay.client import AssistantsClient, AssistantsClientError
from assistant_relay.config import Settings


@pytest.fixture
def make_client(test_app):
    """Factory for SDK clients talking to the test app."""
    def _make(user_id="u1", **kwargs):
        kwargs.setdefault("access_token", make_token(user_id) if user_id else None)
        return AssistantsClient(
            "http://test",
            transport=httpx.ASGITransport(app=test_app),
            **kwargs
        )
    return _make


class TestAssistantsClient:
    """Tests for AssistantsClient."""

    class TestInit:
        """SUT: AssistantsClient.__init__"""

        def test_requires_base_url(self):
            with pytest.raises(AssistantsClientError, match="Backend URL not configured"):
                AssistantsClient("")

    class TestFromSettings:
        """SUT: AssistantsClient.from_settings"""

        async def test_uses_backend_url_and_anon_key(self):
            seen = []

            def handler(request):
                seen.append(request)
                return httpx.Response(200, json={"conversations": [], "total": 0})

            config = Settings(_env_file=None, backend_url="https://relay.example.test", anon_key="anon-456")
            client = AssistantsClient.from_settings(
                config, access_token="token", transport=httpx.MockTransport(handler)
            )
            async with client:
                assert await client.list_conversations() == []

            assert seen[0].url.host == "relay.example.test"
            assert seen[0].headers["apikey"] == "anon-456"
            assert seen[0].headers["Authorization"] == "Bearer token"

        def test_missing_backend_url(self):
            config = Settings(_env_file=None, backend_url=None)
            with pytest.raises(AssistantsClientError, match="Backend URL not configured"):
                AssistantsClient.from_settings(config, access_token="token")

    class TestSendMessage:
        """SUT: AssistantsClient.send_message"""

        async def test_round_trip(self, make_client):
            async with make_client() as client:
                reply = await client.send_message("health_coach", "Help me sleep")

            assert reply.response == "Here is your plan."
            assert reply.conversation_id
            assert reply.thread_id == "thread_1"

        async def test_continue_with_dict_context(self, make_client, fake_thread_client):
            """A camelCase dict context is accepted and the conversation continues."""
            async with make_client() as client:
                first = await client.send_message("excursion_creator", "Plan a day")
                fake_thread_client.statuses = ["completed"]
                second = await client.send_message(
                    "excursion_creator",
                    "Somewhere sunny",
                    conversation_id=first.conversation_id,
                    user_context={"location": {"lat": 1.0, "lng": 2.0, "address": "Santa Monica"}}
                )

            assert second.conversation_id == first.conversation_id
            assert fake_thread_client.sent[first.thread_id][-1].endswith("Location: Santa Monica")

        async def test_sends_anon_key(self):
            seen = []

            def handler(request):
                seen.append(request)
                return httpx.Response(200, json={"response": "ok", "conversationId": "c1", "threadId": "t1"})

            client = AssistantsClient(
                "http://test", access_token="token", anon_key="anon-123", transport=httpx.MockTransport(handler)
            )
            async with client:
                await client.send_message("health_coach", "hi")

            assert seen[0].headers["apikey"] == "anon-123"
            assert seen[0].headers["Authorization"] == "Bearer token"
            assert seen[0].url.path == "/api/v1/assistants/health-coach-assistant"

        async def test_not_authenticated(self, make_client, fake_thread_client):
            async with make_client(user_id=None) as client:
                with pytest.raises(AssistantsClientError, match="Not authenticated"):
                    await client.send_message("health_coach", "hi")
            assert fake_thread_client.calls == []

        async def test_unknown_assistant_type(self, make_client):
            async with make_client() as client:
                with pytest.raises(AssistantsClientError):
                    await client.send_message("travel_agent", "hi")

        async def test_server_error_message(self, make_client):
            """The backend's error text is surfaced on failure."""
            async with make_client() as client:
                with pytest.raises(AssistantsClientError) as exc_info:
                    await client.send_message("health_coach", "  ")

            assert str(exc_info.value) == "Message is required"
            assert exc_info.value.status_code == 500

        async def test_transport_error(self):
            def handler(request):
                raise httpx.ConnectError("connection refused", request=request)

            client = AssistantsClient("http://test", access_token="token", transport=httpx.MockTransport(handler))
            async with client:
                with pytest.raises(AssistantsClientError, match="Failed to send message"):
                    await client.send_message("health_coach", "hi")

    class TestHistory:
        """SUT: AssistantsClient.list_conversations / list_messages / delete_conversation"""

        async def test_list_and_read(self, make_client):
            async with make_client() as client:
                sent = await client.send_message("health_coach", "hello")
                conversations = await client.list_conversations()
                messages = await client.list_messages(sent.conversation_id)

            assert [c.id for c in conversations] == [sent.conversation_id]
            assert [(m.role, m.content) for m in messages] == [
                ("user", "hello"),
                ("assistant", "Here is your plan."),
            ]

        async def test_list_filtered(self, make_client):
            async with make_client() as client:
                await client.send_message("health_coach", "hello")
                conversations = await client.list_conversations("excursion_creator")
            assert conversations == []

        async def test_delete(self, make_client):
            async with make_client() as client:
                sent = await client.send_message("health_coach", "hello")
                await client.delete_conversation(sent.conversation_id)
                assert await client.list_conversations() == []

        async def test_delete_foreign(self, make_client):
            async with make_client("u1") as owner:
                sent = await owner.send_message("health_coach", "hello")

            async with make_client("u2") as other:
                with pytest.raises(AssistantsClientError) as exc_info:
                    await other.delete_conversation(sent.conversation_id)
            assert exc_info.value.status_code == 404

        async def test_validation_error_falls_back_to_default(self, make_client):
            """A 422 whose detail is a list reports the plain failure text."""
            async with make_client() as client:
                with pytest.raises(AssistantsClientError) as exc_info:
                    await client.list_conversations("bogus")

            assert str(exc_info.value) == "Failed to fetch conversations"
            assert exc_info.value.status_code == 422
