"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    id: str
    user_id: str
    assistant_type: str
    thread_id: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
