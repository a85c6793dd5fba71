"""Database package - connection, models, and repositories."""

from .connection import DatabaseConnection
from .repositories.conversation import ConversationRepository
from .repositories.message import MessageRepository

__all__ = [
    "DatabaseConnection",
    "ConversationRepository",
    "MessageRepository",
]
