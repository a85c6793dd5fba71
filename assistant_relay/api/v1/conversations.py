"""Conversation history REST API routes - V1."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, Request

from ...auth import get_current_user_id
from ...db import DatabaseConnection, ConversationRepository, MessageRepository
from ...db.database_models import ConversationDO, MessageDO
from ...errors import PersistenceError
from ...models.conversation import (
    AssistantType,
    ConversationResponse,
    ConversationListResponse,
    MessageResponse,
    ConversationMessagesResponse
)

router = APIRouter(prefix="/api/v1/conversations", tags=["Conversations"])


def _get_db_conn(request: Request) -> DatabaseConnection:
    db_conn = getattr(request.app.state, "db_conn", None)
    if db_conn is None:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return db_conn


def get_conversation_repo(request: Request) -> ConversationRepository:
    """Dependency to get conversation repository."""
    return ConversationRepository(_get_db_conn(request).conn)


def get_message_repo(request: Request) -> MessageRepository:
    """Dependency to get message repository."""
    return MessageRepository(_get_db_conn(request).conn)


def _to_response(conv: ConversationDO) -> ConversationResponse:
    """Convert ConversationDO to ConversationResponse."""
    return ConversationResponse(
        id=conv.id,
        user_id=conv.user_id,
        assistant_type=conv.assistant_type,
        thread_id=conv.thread_id,
        created_at=conv.created_at,
        updated_at=conv.updated_at
    )


def _to_message_response(message: MessageDO) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        role=message.role,
        content=message.content,
        created_at=message.created_at
    )


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    assistant_type: Optional[AssistantType] = Query(None, description="Filter by assistant type"),
    user_id: str = Depends(get_current_user_id),
    repo: ConversationRepository = Depends(get_conversation_repo)
):
    """List the caller's conversations, most recently active first."""
    try:
        conversations = repo.list_for_user(user_id, assistant_type)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ConversationListResponse(
        conversations=[_to_response(c) for c in conversations],
        total=len(conversations)
    )


@router.get("/{conversation_id}/messages", response_model=ConversationMessagesResponse)
async def get_conversation_messages(
    conversation_id: str,
    user_id: str = Depends(get_current_user_id),
    conv_repo: ConversationRepository = Depends(get_conversation_repo),
    message_repo: MessageRepository = Depends(get_message_repo)
):
    """Get a conversation's messages, oldest first."""
    try:
        conversation = conv_repo.get(conversation_id, user_id)
        if not conversation:
            raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")
        messages = message_repo.list_for_conversation(conversation_id, user_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ConversationMessagesResponse(
        conversation_id=conversation_id,
        messages=[_to_message_response(m) for m in messages],
        total=len(messages)
    )


@router.delete("/{conversation_id}", response_model=dict)
async def delete_conversation(
    conversation_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: ConversationRepository = Depends(get_conversation_repo)
):
    """Delete a conversation and its messages."""
    try:
        deleted = repo.delete(conversation_id, user_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")

    return {
        "status": "deleted",
        "message": f"Conversation {conversation_id} deleted successfully"
    }
