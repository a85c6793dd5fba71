"""API v1 package."""

from .assistants import router as assistants_router
from .conversations import router as conversations_router

__all__ = ["assistants_router", "conversations_router"]
