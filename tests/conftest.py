"""Shared pytest fixtures."""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from jose import jwt
from typing import Any, Dict, List, Optional

from assistant_relay.db import DatabaseConnection, ConversationRepository, MessageRepository
from assistant_relay.errors import RemoteDependencyError
from assistant_relay.api.v1 import assistants, conversations
from assistant_relay.auth import TokenVerifier
from assistant_relay.config import Settings
from assistant_relay.services import ConversationOrchestrator, RunPoller, build_profiles
from assistant_relay.services.thread_client import Run


JWT_SECRET = "test-jwt-secret-with-enough-length"


def make_token(user_id: str, audience: str = "authenticated", secret: str = JWT_SECRET) -> str:
    """Issue a signed access token for a user."""
    return jwt.encode({"sub": user_id, "aud": audience, "role": "authenticated"}, secret, algorithm="HS256")


class FakeThreadClient:
    """In-process stand-in for ThreadClient that records every call."""

    def __init__(
        self,
        statuses: Optional[List[str]] = None,
        reply: Optional[str] = "Here is your plan.",
        initial_status: str = "queued",
        fail_on: Optional[str] = None,
        api_key: Optional[str] = "sk-test"
    ):
        self.api_key = api_key
        self.statuses = list(statuses if statuses is not None else ["in_progress", "completed"])
        self.reply = reply
        self.initial_status = initial_status
        self.fail_on = fail_on
        self.calls: List[tuple] = []
        self.sent: Dict[str, List[str]] = {}
        self._thread_count = 0
        self._run_count = 0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _maybe_fail(self, operation: str):
        if self.fail_on == operation:
            raise RemoteDependencyError(operation, 500, "boom")

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    async def create_thread(self) -> str:
        self.calls.append(("create_thread",))
        self._maybe_fail("create_thread")
        self._thread_count += 1
        thread_id = f"thread_{self._thread_count}"
        self.sent[thread_id] = []
        return thread_id

    async def add_message(self, thread_id: str, role: str, content: str) -> Dict[str, Any]:
        self.calls.append(("add_message", thread_id, role, content))
        self._maybe_fail("add_message")
        self.sent.setdefault(thread_id, []).append(content)
        return {"id": f"msg_{len(self.calls)}", "role": role}

    async def create_run(self, thread_id: str, assistant_id: str) -> Run:
        self.calls.append(("create_run", thread_id, assistant_id))
        self._maybe_fail("create_run")
        self._run_count += 1
        return Run(id=f"run_{self._run_count}", thread_id=thread_id, status=self.initial_status)

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        self.calls.append(("get_run", thread_id, run_id))
        self._maybe_fail("get_run")
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return Run(id=run_id, thread_id=thread_id, status=status)

    async def list_messages(self, thread_id: str) -> List[Dict[str, Any]]:
        self.calls.append(("list_messages", thread_id))
        self._maybe_fail("list_messages")
        listing = [{"id": "msg_user", "role": "user", "content": [{"type": "text", "text": {"value": "hi"}}]}]
        if self.reply is not None:
            listing.insert(0, {
                "id": "msg_reply",
                "role": "assistant",
                "content": [{"type": "text", "text": {"value": self.reply, "annotations": []}}]
            })
        return listing


async def no_sleep(seconds: float) -> None:
    """Sleep replacement that returns immediately."""
    return None


@pytest.fixture
def db_conn(tmp_path):
    """Provide a fresh database connection."""
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield db
    db.close()


@pytest.fixture
def conversation_repo(db_conn):
    """Provide a ConversationRepository."""
    return ConversationRepository(db_conn.conn)


@pytest.fixture
def message_repo(db_conn):
    """Provide a MessageRepository."""
    return MessageRepository(db_conn.conn)


@pytest.fixture
def fake_thread_client():
    """Provide a FakeThreadClient whose runs complete on the second check."""
    return FakeThreadClient()


@pytest.fixture
def test_app(db_conn, fake_thread_client):
    """Create a test app wired to the fake remote service, without lifespan."""
    app = FastAPI(title="Assistant Relay Test")
    app.include_router(assistants.router)
    app.include_router(conversations.router)

    app.state.db_conn = db_conn
    app.state.thread_client = fake_thread_client
    app.state.token_verifier = TokenVerifier(secret=JWT_SECRET)
    app.state.orchestrator = ConversationOrchestrator(
        conversations=ConversationRepository(db_conn.conn),
        messages=MessageRepository(db_conn.conn),
        thread_client=fake_thread_client,
        poller=RunPoller(fake_thread_client, sleep=no_sleep),
        profiles=build_profiles(Settings(
            _env_file=None,
            health_coach_assistant_id="asst_health",
            excursion_creator_assistant_id="asst_excursion"
        ))
    )
    return app


@pytest.fixture
async def client(test_app):
    """Create async HTTP client for the test app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(user_id: str) -> Dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}
