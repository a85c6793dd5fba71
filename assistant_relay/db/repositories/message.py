"""Message repository for database operations."""

import duckdb
from typing import List
from .base import BaseRepository
from ..database_models.message import MessageDO
from ...errors import PersistenceError


class MessageRepository(BaseRepository):
    """Repository for Message operations."""

    def add(self, message: MessageDO, user_id: str) -> MessageDO:
        """
        Add a new message to a conversation owned by the user.

        The parent conversation's updated_at is bumped in the same transaction.

        Args:
            message: MessageDO instance
            user_id: Acting user ID, must own the conversation

        Returns:
            The MessageDO with its store-issued id

        Raises:
            PersistenceError: If the insert fails or the conversation is not owned by the user
        """
        with self._transaction("add message") as conn:
            result = conn.execute("""
                INSERT INTO messages (id, conversation_id, role, content, created_at)
                SELECT nextval('messages_id_seq'), ?, ?, ?, ?
                WHERE EXISTS (
                    SELECT 1 FROM conversations WHERE id = ? AND user_id = ?
                )
                RETURNING id
            """, [
                message.conversation_id,
                message.role,
                message.content,
                message.created_at,
                message.conversation_id,
                user_id
            ]).fetchone()

            if not result:
                raise PersistenceError(
                    f"Conversation {message.conversation_id} not found for user"
                )

            conn.execute("""
                UPDATE conversations SET updated_at = ? WHERE id = ?
            """, [message.created_at, message.conversation_id])

        message.id = result[0]
        self.logger.debug(f"Added {message.role} message {message.id} to conversation {message.conversation_id}")
        return message

    def list_for_conversation(self, conversation_id: str, user_id: str) -> List[MessageDO]:
        """
        Get messages for a conversation owned by the user.

        Args:
            conversation_id: Conversation ID
            user_id: Acting user ID

        Returns:
            List of MessageDO instances (chronological order)
        """
        try:
            results = self.conn.execute("""
                SELECT m.id, m.conversation_id, m.role, m.content, m.created_at
                FROM messages m
                JOIN conversations c ON c.id = m.conversation_id
                WHERE m.conversation_id = ? AND c.user_id = ?
                ORDER BY m.created_at ASC, m.id ASC
            """, [conversation_id, user_id]).fetchall()
        except duckdb.Error as e:
            self.logger.error(f"Failed to get conversation messages: {e}")
            raise PersistenceError(f"Failed to fetch messages: {e}") from e

        return [
            MessageDO(
                id=row[0],
                conversation_id=row[1],
                role=row[2],
                content=row[3],
                created_at=row[4]
            )
            for row in results
        ]
