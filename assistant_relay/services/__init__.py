"""Services package."""

from .thread_client import Run, RunStatus, ThreadClient
from .run_poller import PollState, RunPoller
from .profiles import AssistantProfile, build_profiles, format_user_context
from .orchestrator import ConversationOrchestrator, TurnResult

__all__ = [
    "Run",
    "RunStatus",
    "ThreadClient",
    "PollState",
    "RunPoller",
    "AssistantProfile",
    "build_profiles",
    "format_user_context",
    "ConversationOrchestrator",
    "TurnResult",
]
