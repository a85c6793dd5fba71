"""Client SDK package."""

from .assistants import AssistantsClient, AssistantsClientError

__all__ = ["AssistantsClient", "AssistantsClientError"]
