"""Conversation repository for database operations."""

import duckdb
from typing import Optional, List
from .base import BaseRepository
from ..database_models.conversation import ConversationDO
from ...errors import PersistenceError


_COLUMNS = "id, user_id, assistant_type, thread_id, created_at, updated_at"


def _to_do(row) -> ConversationDO:
    return ConversationDO(
        id=row[0],
        user_id=row[1],
        assistant_type=row[2],
        thread_id=row[3],
        created_at=row[4],
        updated_at=row[5]
    )


class ConversationRepository(BaseRepository):
    """
    Repository for Conversation operations.

    Every read and delete is scoped to the acting user, so a conversation
    owned by someone else behaves exactly like a missing one.
    """

    def create(self, conversation: ConversationDO) -> ConversationDO:
        """
        Create a new conversation record.

        Args:
            conversation: ConversationDO instance

        Returns:
            The stored ConversationDO

        Raises:
            PersistenceError: If the insert fails (e.g. duplicate thread_id)
        """
        try:
            self.conn.execute(f"""
                INSERT INTO conversations ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?)
            """, [
                conversation.id,
                conversation.user_id,
                conversation.assistant_type,
                conversation.thread_id,
                conversation.created_at,
                conversation.updated_at
            ])
            self.conn.commit()
            self.logger.info(
                f"Created conversation record: {conversation.id} "
                f"(type={conversation.assistant_type}, thread={conversation.thread_id})"
            )
            return conversation
        except duckdb.Error as e:
            self.logger.error(f"Failed to create conversation: {e}")
            raise PersistenceError(f"Failed to create conversation: {e}") from e

    def get(self, conversation_id: str, user_id: str) -> Optional[ConversationDO]:
        """
        Get a conversation owned by the given user.

        Args:
            conversation_id: Conversation ID
            user_id: Acting user ID

        Returns:
            ConversationDO instance, or None if missing or owned by another user
        """
        try:
            result = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE id = ? AND user_id = ?
            """, [conversation_id, user_id]).fetchone()
        except duckdb.Error as e:
            self.logger.error(f"Failed to get conversation {conversation_id}: {e}")
            raise PersistenceError(f"Failed to get conversation: {e}") from e

        return _to_do(result) if result else None

    def list_for_user(self, user_id: str, assistant_type: Optional[str] = None) -> List[ConversationDO]:
        """
        List a user's conversations, most recently active first.

        Args:
            user_id: Acting user ID
            assistant_type: Optional assistant type filter

        Returns:
            List of ConversationDO instances
        """
        sql = f"SELECT {_COLUMNS} FROM conversations WHERE user_id = ?"
        params = [user_id]
        if assistant_type:
            sql += " AND assistant_type = ?"
            params.append(assistant_type)
        sql += " ORDER BY updated_at DESC"

        try:
            results = self.conn.execute(sql, params).fetchall()
        except duckdb.Error as e:
            self.logger.error(f"Failed to list conversations: {e}")
            raise PersistenceError(f"Failed to fetch conversations: {e}") from e

        return [_to_do(row) for row in results]

    def delete(self, conversation_id: str, user_id: str) -> bool:
        """
        Delete a conversation and all of its messages.

        Args:
            conversation_id: Conversation ID
            user_id: Acting user ID, must own the conversation

        Returns:
            True if a conversation was deleted, False if none was owned by the user
        """
        with self._transaction("delete conversation") as conn:
            owned = conn.execute("""
                SELECT 1 FROM conversations WHERE id = ? AND user_id = ?
            """, [conversation_id, user_id]).fetchone()
            if not owned:
                return False

            conn.execute("DELETE FROM messages WHERE conversation_id = ?", [conversation_id])
            conn.execute("DELETE FROM conversations WHERE id = ?", [conversation_id])

        self.logger.info(f"Deleted conversation record: {conversation_id}")
        return True
