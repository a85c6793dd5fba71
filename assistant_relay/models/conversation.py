"""Conversation history API models."""

from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel, Field


AssistantType = Literal["health_coach", "excursion_creator"]
MessageRole = Literal["user", "assistant"]


class ConversationResponse(BaseModel):
    """Response model for conversation information."""

    id: str = Field(description="Conversation ID")
    user_id: str = Field(description="Owning user ID")
    assistant_type: AssistantType = Field(description="Assistant type")
    thread_id: str = Field(description="Remote thread ID")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last activity timestamp")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[ConversationResponse] = Field(description="List of conversations")
    total: int = Field(description="Total number of conversations")


class MessageResponse(BaseModel):
    """Response model for a single message."""

    id: int = Field(description="Message ID")
    conversation_id: str = Field(description="Conversation ID")
    role: MessageRole = Field(description="Message role (user/assistant)")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Message timestamp")


class ConversationMessagesResponse(BaseModel):
    """Response model for conversation messages."""

    conversation_id: str = Field(description="Conversation ID")
    messages: List[MessageResponse] = Field(description="List of messages")
    total: int = Field(description="Total number of messages")
