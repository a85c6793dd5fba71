"""Per-assistant-type configuration."""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..models.assistant import UserContext


ContextEnricher = Callable[[str, Optional[UserContext]], str]

# Public endpoint name per assistant type
ENDPOINTS = {
    "health_coach": "health-coach-assistant",
    "excursion_creator": "excursion-creator-assistant",
}


def format_user_context(message: str, user_context: Optional[UserContext]) -> str:
    """
    Append a readable summary of the user's context to a message.

    Only the text sent to the remote thread is enriched; the stored message
    keeps the original wording.

    Args:
        message: Original message text
        user_context: Optional structured user context

    Returns:
        The message with a "User Context" block, or the message unchanged
        when there is nothing to add
    """
    if user_context is None:
        return message

    lines = []
    if user_context.health_goals:
        lines.append(f"Health Goals: {', '.join(user_context.health_goals)}")
    if user_context.mobility_level:
        lines.append(f"Mobility Level: {user_context.mobility_level}")
    if user_context.preferred_activities:
        lines.append(f"Preferred Activities: {', '.join(user_context.preferred_activities)}")
    if user_context.location and user_context.location.address:
        lines.append(f"Location: {user_context.location.address}")

    if not lines:
        return message

    return f"{message}\n\nUser Context:\n" + "\n".join(lines)


@dataclass(frozen=True)
class AssistantProfile:
    """Everything that differs between assistant types."""

    assistant_type: str
    endpoint: str
    display_name: str
    assistant_id: Optional[str] = None
    enrich: Optional[ContextEnricher] = None

    def outbound_text(self, message: str, user_context: Optional[UserContext]) -> str:
        """Text to send to the remote thread for this assistant."""
        if self.enrich is None:
            return message
        return self.enrich(message, user_context)


def build_profiles(settings) -> Dict[str, AssistantProfile]:
    """
    Build the assistant profiles from settings.

    Args:
        settings: Application settings instance

    Returns:
        Mapping of assistant type to AssistantProfile
    """
    return {
        "health_coach": AssistantProfile(
            assistant_type="health_coach",
            endpoint=ENDPOINTS["health_coach"],
            display_name="Health Coach",
            assistant_id=settings.get_assistant_id("health_coach"),
        ),
        "excursion_creator": AssistantProfile(
            assistant_type="excursion_creator",
            endpoint=ENDPOINTS["excursion_creator"],
            display_name="Excursion Creator",
            assistant_id=settings.get_assistant_id("excursion_creator"),
            enrich=format_user_context,
        ),
    }
