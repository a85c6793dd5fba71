"""Conversation orchestration - one chat turn from inbound message to persisted reply."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .profiles import AssistantProfile
from .run_poller import RunPoller
from .thread_client import ThreadClient
from ..db.database_models import ConversationDO, MessageDO
from ..db.repositories import ConversationRepository, MessageRepository
from ..errors import AssistantReplyError, ConfigurationError, MessageValidationError
from ..models.assistant import UserContext
from ..utils.logger import get_app_logger


@dataclass
class TurnResult:
    """Outcome of a successful chat turn."""

    reply_text: str
    conversation_id: str
    thread_id: str


def extract_reply_text(remote_messages: List[Dict[str, Any]]) -> str:
    """
    Pick the assistant's reply out of a thread listing.

    Args:
        remote_messages: Remote thread messages, newest first

    Returns:
        Text of the first text part of the newest assistant message

    Raises:
        AssistantReplyError: If there is no assistant message or it has no text
    """
    assistant_message = next(
        (m for m in remote_messages if m.get("role") == "assistant"),
        None
    )
    if assistant_message is None:
        raise AssistantReplyError("No assistant response found")

    text_part = next(
        (c for c in assistant_message.get("content") or [] if c.get("type") == "text"),
        None
    )
    if text_part is None:
        raise AssistantReplyError("No text content in assistant response")

    value = (text_part.get("text") or {}).get("value")
    if value is None:
        raise AssistantReplyError("No text content in assistant response")
    return value


class ConversationOrchestrator:
    """
    Runs one chat turn against a remote assistant and records it.

    Holds no per-request state, so a single instance serves every request.
    Partial progress is never rolled back: a user message stays stored even
    when the remote side fails afterwards.
    """

    def __init__(
        self,
        conversations: ConversationRepository,
        messages: MessageRepository,
        thread_client: ThreadClient,
        poller: RunPoller,
        profiles: Dict[str, AssistantProfile]
    ):
        self.conversations = conversations
        self.messages = messages
        self.thread_client = thread_client
        self.poller = poller
        self.profiles = profiles
        self.logger = get_app_logger()

    def get_profile(self, assistant_type: str) -> AssistantProfile:
        profile = self.profiles.get(assistant_type)
        if profile is None:
            raise MessageValidationError(f"Unknown assistant type: {assistant_type}")
        return profile

    async def _resolve_conversation(
        self,
        user_id: str,
        profile: AssistantProfile,
        conversation_id: Optional[str]
    ) -> ConversationDO:
        if conversation_id:
            conversation = self.conversations.get(conversation_id, user_id)
            if conversation is not None:
                return conversation
            self.logger.info(f"Conversation {conversation_id} not found for user, starting a new one")

        thread_id = await self.thread_client.create_thread()
        now = datetime.utcnow()
        return self.conversations.create(ConversationDO(
            id=str(uuid.uuid4()),
            user_id=user_id,
            assistant_type=profile.assistant_type,
            thread_id=thread_id,
            created_at=now,
            updated_at=now
        ))

    async def send_message(
        self,
        user_id: str,
        assistant_type: str,
        message: str,
        conversation_id: Optional[str] = None,
        user_context: Optional[UserContext] = None
    ) -> TurnResult:
        """
        Relay a user message to the assistant and return its reply.

        Args:
            user_id: Verified caller identity
            assistant_type: Which assistant to talk to
            message: User message text
            conversation_id: Optional existing conversation to continue
            user_context: Optional context used to enrich the remote-bound text

        Returns:
            TurnResult with the reply, conversation ID and remote thread ID
        """
        profile = self.get_profile(assistant_type)

        if not message or not message.strip():
            raise MessageValidationError("Message is required")

        if not self.thread_client.is_configured:
            raise ConfigurationError("OpenAI API key not configured")

        conversation = await self._resolve_conversation(user_id, profile, conversation_id)
        thread_id = conversation.thread_id

        self.messages.add(MessageDO(
            conversation_id=conversation.id,
            role="user",
            content=message
        ), user_id)

        await self.thread_client.add_message(
            thread_id, "user", profile.outbound_text(message, user_context)
        )

        if not profile.assistant_id:
            raise ConfigurationError(f"{profile.display_name} Assistant ID not configured")

        run = await self.thread_client.create_run(thread_id, profile.assistant_id)
        await self.poller.wait(run)

        remote_messages = await self.thread_client.list_messages(thread_id)
        reply_text = extract_reply_text(remote_messages)

        self.messages.add(MessageDO(
            conversation_id=conversation.id,
            role="assistant",
            content=reply_text
        ), user_id)

        self.logger.info(
            f"Completed {profile.assistant_type} turn for conversation {conversation.id} (run {run.id})"
        )
        return TurnResult(
            reply_text=reply_text,
            conversation_id=conversation.id,
            thread_id=thread_id
        )
