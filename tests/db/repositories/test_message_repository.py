"""Tests for MessageRepository."""

import pytest
from datetime import datetime, timedelta

from assistant_relay.db.database_models import ConversationDO, MessageDO
from assistant_relay.errors import PersistenceError


@pytest.fixture
def conversation(conversation_repo):
    """A conversation owned by u1, last active a day ago."""
    yesterday = datetime.utcnow() - timedelta(days=1)
    return conversation_repo.create(ConversationDO(
        id="c1", user_id="u1", assistant_type="health_coach", thread_id="thread_1",
        created_at=yesterday, updated_at=yesterday
    ))


class TestMessageRepository:
    """Tests for MessageRepository."""

    class TestAdd:
        """SUT: MessageRepository.add"""

        def test_assigns_id(self, message_repo, conversation):
            """add() should set a store-issued id."""
            message = message_repo.add(MessageDO(conversation_id="c1", role="user", content="hi"), "u1")
            assert message.id is not None

        def test_ids_unique(self, message_repo, conversation):
            """Each message gets its own id."""
            first = message_repo.add(MessageDO(conversation_id="c1", role="user", content="a"), "u1")
            second = message_repo.add(MessageDO(conversation_id="c1", role="assistant", content="b"), "u1")
            assert first.id != second.id

        def test_bumps_conversation_updated_at(self, message_repo, conversation_repo, conversation):
            """Inserting a message should refresh the conversation's activity timestamp."""
            before = conversation_repo.get("c1", "u1").updated_at
            message = message_repo.add(MessageDO(conversation_id="c1", role="user", content="hi"), "u1")
            after = conversation_repo.get("c1", "u1").updated_at
            assert after > before
            assert after == message.created_at

        def test_rejects_foreign_conversation(self, message_repo, conversation):
            """Writing into another user's conversation should fail."""
            with pytest.raises(PersistenceError):
                message_repo.add(MessageDO(conversation_id="c1", role="user", content="hi"), "u2")
            assert message_repo.list_for_conversation("c1", "u1") == []

        def test_rejects_missing_conversation(self, message_repo):
            """Writing into a missing conversation should fail."""
            with pytest.raises(PersistenceError):
                message_repo.add(MessageDO(conversation_id="nope", role="user", content="hi"), "u1")

        def test_rejects_invalid_role(self, message_repo, conversation):
            """Roles other than user/assistant should fail."""
            with pytest.raises(PersistenceError):
                message_repo.add(MessageDO(conversation_id="c1", role="system", content="hi"), "u1")

        def test_failed_add_leaves_timestamp(self, message_repo, conversation_repo, conversation):
            """A rejected insert should not touch updated_at."""
            before = conversation_repo.get("c1", "u1").updated_at
            with pytest.raises(PersistenceError):
                message_repo.add(MessageDO(conversation_id="c1", role="system", content="hi"), "u1")
            assert conversation_repo.get("c1", "u1").updated_at == before

    class TestListForConversation:
        """SUT: MessageRepository.list_for_conversation"""

        def test_chronological_order(self, message_repo, conversation):
            """Messages should come back oldest first."""
            now = datetime.utcnow()
            message_repo.add(MessageDO(conversation_id="c1", role="assistant", content="second",
                                       created_at=now), "u1")
            message_repo.add(MessageDO(conversation_id="c1", role="user", content="first",
                                       created_at=now - timedelta(seconds=5)), "u1")

            messages = message_repo.list_for_conversation("c1", "u1")
            assert [m.content for m in messages] == ["first", "second"]

        def test_ties_broken_by_insert_order(self, message_repo, conversation):
            """Messages with equal timestamps keep insertion order."""
            now = datetime.utcnow()
            message_repo.add(MessageDO(conversation_id="c1", role="user", content="a", created_at=now), "u1")
            message_repo.add(MessageDO(conversation_id="c1", role="assistant", content="b", created_at=now), "u1")

            messages = message_repo.list_for_conversation("c1", "u1")
            assert [m.content for m in messages] == ["a", "b"]

        def test_other_user_sees_nothing(self, message_repo, conversation):
            """Messages are only visible to the conversation owner."""
            message_repo.add(MessageDO(conversation_id="c1", role="user", content="hi"), "u1")
            assert message_repo.list_for_conversation("c1", "u2") == []

        def test_fields(self, message_repo, conversation):
            """Listed messages should carry all stored fields."""
            message_repo.add(MessageDO(conversation_id="c1", role="user", content="hi"), "u1")
            message = message_repo.list_for_conversation("c1", "u1")[0]
            assert message.conversation_id == "c1"
            assert message.role == "user"
            assert message.content == "hi"
            assert isinstance(message.created_at, datetime)
