"""Pydantic models for API request/response."""

from .assistant import ChatRequest, ChatResponse, ErrorResponse, Location, UserContext
from .conversation import (
    AssistantType,
    MessageRole,
    ConversationResponse,
    ConversationListResponse,
    MessageResponse,
    ConversationMessagesResponse
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "Location",
    "UserContext",
    "AssistantType",
    "MessageRole",
    "ConversationResponse",
    "ConversationListResponse",
    "MessageResponse",
    "ConversationMessagesResponse",
]
