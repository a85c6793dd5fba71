"""Async client SDK for the assistant relay.

Used by the app layer to send chat turns and read or delete conversation
history. Ownership is enforced by the backend's store queries; the client
never filters results itself.
"""

from typing import Any, Dict, List, Optional, Union

import httpx

from ..config import Settings
from ..models.assistant import ChatRequest, ChatResponse, UserContext
from ..models.conversation import ConversationResponse, MessageResponse
from ..services.profiles import ENDPOINTS


class AssistantsClientError(Exception):
    """A client call could not be completed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        for key in ("error", "detail"):
            # FastAPI validation errors carry a list under "detail"
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return default


class AssistantsClient:
    """HTTP client for the relay's assistant and conversation endpoints."""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Relay base URL
            access_token: Bearer token of the signed-in user
            anon_key: Public anonymous key, sent as the ``apikey`` header
            timeout: Request timeout in seconds (covers the full run polling window)
            transport: Optional httpx transport (used by tests)
        """
        if not base_url:
            raise AssistantsClientError("Backend URL not configured")

        self.access_token = access_token
        headers = {"Content-Type": "application/json"}
        if anon_key:
            headers["apikey"] = anon_key

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport
        )

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "AssistantsClient":
        """
        Build a client from the ``backend_url`` and ``anon_key`` settings.

        Args:
            config: Application settings
            access_token: Bearer token of the signed-in user
            transport: Optional httpx transport (used by tests)

        Returns:
            Configured AssistantsClient
        """
        return cls(
            config.backend_url,
            access_token=access_token,
            anon_key=config.anon_key,
            transport=transport
        )

    def _auth_headers(self) -> Dict[str, str]:
        if not self.access_token:
            raise AssistantsClientError("Not authenticated")
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _send(self, method: str, path: str, failure: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, headers=self._auth_headers(), **kwargs)
        except httpx.HTTPError as e:
            raise AssistantsClientError(f"{failure}: {e}") from e

        if not response.is_success:
            raise AssistantsClientError(
                _error_message(response, failure),
                status_code=response.status_code
            )
        return response

    async def send_message(
        self,
        assistant_type: str,
        message: str,
        conversation_id: Optional[str] = None,
        user_context: Optional[Union[UserContext, Dict[str, Any]]] = None
    ) -> ChatResponse:
        """
        Send a chat turn to an assistant.

        Args:
            assistant_type: ``health_coach`` or ``excursion_creator``
            message: Message text
            conversation_id: Optional conversation to continue
            user_context: Optional user context (model or camelCase dict)

        Returns:
            ChatResponse with the reply and conversation/thread IDs
        """
        endpoint = ENDPOINTS.get(assistant_type)
        if endpoint is None:
            raise AssistantsClientError(f"Unknown assistant type: {assistant_type}")

        if isinstance(user_context, dict):
            user_context = UserContext.model_validate(user_context)

        body = ChatRequest(
            message=message,
            conversation_id=conversation_id,
            user_context=user_context
        ).model_dump(by_alias=True, exclude_none=True)

        response = await self._send(
            "POST", f"/api/v1/assistants/{endpoint}", "Failed to send message", json=body
        )
        return ChatResponse.model_validate(response.json())

    async def list_conversations(self, assistant_type: Optional[str] = None) -> List[ConversationResponse]:
        """
        List the signed-in user's conversations, most recently active first.

        Args:
            assistant_type: Optional assistant type filter
        """
        params = {"assistant_type": assistant_type} if assistant_type else None
        response = await self._send(
            "GET", "/api/v1/conversations", "Failed to fetch conversations", params=params
        )
        return [ConversationResponse.model_validate(c) for c in response.json()["conversations"]]

    async def list_messages(self, conversation_id: str) -> List[MessageResponse]:
        """
        Get a conversation's messages, oldest first.

        Args:
            conversation_id: Conversation ID
        """
        response = await self._send(
            "GET", f"/api/v1/conversations/{conversation_id}/messages", "Failed to fetch messages"
        )
        return [MessageResponse.model_validate(m) for m in response.json()["messages"]]

    async def delete_conversation(self, conversation_id: str) -> None:
        """
        Delete a conversation and its messages.

        Args:
            conversation_id: Conversation ID
        """
        await self._send(
            "DELETE", f"/api/v1/conversations/{conversation_id}", "Failed to delete conversation"
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
