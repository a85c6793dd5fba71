"""Assistant chat API models."""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Where the user currently is."""

    lat: float = Field(description="Latitude")
    lng: float = Field(description="Longitude")
    address: Optional[str] = Field(None, description="Human-readable address")


class UserContext(BaseModel):
    """Structured user profile data an assistant may use to tailor replies."""

    model_config = ConfigDict(populate_by_name=True)

    health_goals: Optional[List[str]] = Field(None, alias="healthGoals", description="Health goals")
    mobility_level: Optional[str] = Field(None, alias="mobilityLevel", description="Mobility level")
    preferred_activities: Optional[List[str]] = Field(
        None, alias="preferredActivities", description="Preferred activities"
    )
    location: Optional[Location] = Field(None, description="Current location")


class ChatRequest(BaseModel):
    """Request model for sending a chat message to an assistant."""

    model_config = ConfigDict(populate_by_name=True)

    # Emptiness is checked by the orchestrator so it reports through the error envelope
    message: str = Field(default="", description="Message text")
    conversation_id: Optional[str] = Field(None, alias="conversationId", description="Existing conversation ID")
    user_context: Optional[UserContext] = Field(None, alias="userContext", description="Optional user context")


class ChatResponse(BaseModel):
    """Response model for a completed chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    response: str = Field(description="Assistant reply text")
    conversation_id: str = Field(alias="conversationId", description="Conversation ID")
    thread_id: str = Field(alias="threadId", description="Remote thread ID")


class ErrorResponse(BaseModel):
    """Error envelope returned by the assistant endpoints."""

    error: str = Field(description="Human-readable error message")
